import logging

from django.db import transaction
from django.db.models import F, Q

from apps.users.models import Freelancer, JobPoster
from core.constants import PAYMENT_COMPLETED
from core.exceptions import InternalError
from .models import Payment

logger = logging.getLogger(__name__)


def settle(job, bid):
    """
    Record the payment for a completed job and move both running balances.

    Must run inside the transaction that moves the job from in-progress to
    completed; that one-way transition is what keeps settlement single-shot.
    The one-to-one link from Payment to Job rejects a second record at the
    database level as well.
    """
    if not transaction.get_connection().in_atomic_block:
        raise InternalError("Settlement must run inside the job completion transaction.")

    payment = Payment.objects.create(
        job=job,
        bid=bid,
        amount=bid.amount,
        payer_id=job.poster_id,
        payee_id=bid.freelancer_id,
        status=PAYMENT_COMPLETED,
    )

    earned = Freelancer.objects.filter(user_id=bid.freelancer_id).update(
        money_earned=F('money_earned') + bid.amount
    )
    spent = JobPoster.objects.filter(user_id=job.poster_id).update(
        money_spent=F('money_spent') + bid.amount
    )
    if earned != 1 or spent != 1:
        raise InternalError(
            f"Missing account profile while settling job {job.id} "
            f"(freelancer rows={earned}, poster rows={spent})"
        )

    logger.info(
        f"Settled job {job.id}: {bid.amount} from user {job.poster_id} to user {bid.freelancer_id}"
    )
    return payment


def list_payments_for(caller):
    return (
        Payment.objects
        .filter(Q(payer_id=caller.id) | Q(payee_id=caller.id))
        .select_related('job', 'payer', 'payee')
    )
