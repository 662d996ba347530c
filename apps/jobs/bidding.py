"""
Bid submission, acceptance and rejection.

A bid moves pending -> accepted or pending -> rejected and never leaves
either terminal state. Accepting one bid moves its job to in-progress and
rejects every other pending bid on that job in the same transaction.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count
from django.utils import timezone

from apps.chats.services import get_or_create_chat, add_message
from core.constants import JOB_OPEN, JOB_IN_PROGRESS, BID_PENDING, BID_ACCEPTED, BID_REJECTED
from core.exceptions import DuplicateBid, InvalidState, NotAuthorized, NotFound, ValidationError
from core.notifications import notify_bid_accepted, notify_bid_rejected
from .models import Job, Bid

logger = logging.getLogger(__name__)

ACCEPTANCE_MESSAGE = 'Congratulations! Your bid for "{title}" has been accepted.'


def _validate_bid_terms(amount, delivery_time, proposal):
    if amount is None or Decimal(amount) <= 0:
        raise ValidationError("Bid amount must be a positive number")
    if isinstance(delivery_time, bool) or not isinstance(delivery_time, int) or delivery_time < 1:
        raise ValidationError("Delivery time must be a positive number of days")
    if not proposal or not proposal.strip():
        raise ValidationError("Proposal is required")


def _has_bid(job, freelancer_id):
    return Bid.objects.filter(job=job, freelancer_id=freelancer_id).exists()


def submit_bid(job_id, caller, amount, delivery_time, proposal):
    """
    Place a freelancer's bid on an open job and open their chat with the poster.

    The job row is locked while the open-status and duplicate checks run, and
    the (job, freelancer) unique constraint catches anything that slips past.
    """
    caller.require_freelancer("Only freelancers can create bids")
    _validate_bid_terms(amount, delivery_time, proposal)

    try:
        with transaction.atomic():
            try:
                job = Job.objects.select_for_update().get(pk=job_id)
            except Job.DoesNotExist:
                raise NotFound("Job not found")
            if job.status != JOB_OPEN:
                raise InvalidState("Cannot bid on a job that is not open")
            if job.poster_id == caller.id:
                raise NotAuthorized("You cannot bid on your own job")
            if _has_bid(job, caller.id):
                raise DuplicateBid()

            bid = Bid.objects.create(
                job=job,
                freelancer_id=caller.id,
                amount=Decimal(amount),
                delivery_time=delivery_time,
                proposal=proposal.strip(),
                status=BID_PENDING,
            )
            get_or_create_chat(job, caller.id)
    except IntegrityError:
        raise DuplicateBid()

    logger.info(f"Freelancer {caller.id} bid {bid.amount} on job {job.id}")
    return bid


def _get_bid_for_poster(bid_id, caller, action):
    try:
        bid = Bid.objects.select_related('job', 'freelancer').get(pk=bid_id)
    except Bid.DoesNotExist:
        raise NotFound("Bid not found")
    job = bid.job
    if job.poster_id != caller.id:
        raise NotAuthorized(f"Not authorized to {action} this bid")
    if job.status != JOB_OPEN:
        raise InvalidState(f"Cannot {action} bid for a job that is not open")
    if bid.status != BID_PENDING:
        raise InvalidState("Bid has already been processed")
    return bid, job


def accept_bid(bid_id, caller):
    """
    Hire the freelancer behind a bid.

    The job's open -> in-progress move is a compare-and-set on the status
    column; when two acceptances race, only one update matches and the other
    raises InvalidState before touching any bid.
    """
    bid, job = _get_bid_for_poster(bid_id, caller, 'accept')

    with transaction.atomic():
        now = timezone.now()
        claimed = Job.objects.filter(pk=job.pk, status=JOB_OPEN).update(
            status=JOB_IN_PROGRESS, selected_bid=bid, updated_at=now
        )
        if not claimed:
            raise InvalidState("Cannot accept bid for a job that is not open")

        accepted = Bid.objects.filter(pk=bid.pk, status=BID_PENDING).update(
            status=BID_ACCEPTED, updated_at=now
        )
        if not accepted:
            raise InvalidState("Bid has already been processed")

        rejected = (
            Bid.objects
            .filter(job_id=job.pk, status=BID_PENDING)
            .exclude(pk=bid.pk)
            .update(status=BID_REJECTED, updated_at=now)
        )

        job.refresh_from_db()
        bid.refresh_from_db()
        chat = get_or_create_chat(job, bid.freelancer_id)
        add_message(chat, job.poster_id, ACCEPTANCE_MESSAGE.format(title=job.title))
        notify_bid_accepted(bid, job)

    logger.info(f"Bid {bid.id} accepted on job {job.id}; {rejected} other bid(s) rejected")
    return bid, job, chat


def reject_bid(bid_id, caller):
    bid, job = _get_bid_for_poster(bid_id, caller, 'reject')

    with transaction.atomic():
        updated = Bid.objects.filter(pk=bid.pk, status=BID_PENDING, job__status=JOB_OPEN).update(
            status=BID_REJECTED, updated_at=timezone.now()
        )
        if not updated:
            raise InvalidState("Bid has already been processed")
        bid.refresh_from_db()
        notify_bid_rejected(bid, job)
    return bid


def list_bids_for_job(job_id, caller):
    try:
        job = Job.objects.get(pk=job_id)
    except Job.DoesNotExist:
        raise NotFound("Job not found")
    if job.poster_id != caller.id:
        raise NotAuthorized("Not authorized to view these bids")
    return job.bids.select_related('freelancer').order_by('-created_at', '-id')


def list_my_bids(caller):
    caller.require_freelancer("Only freelancers can access this endpoint")
    return (
        Bid.objects
        .filter(freelancer_id=caller.id)
        .select_related('job')
        .order_by('-created_at', '-id')
    )


def list_my_applications(caller):
    """
    Jobs the freelancer has bid on, each with the caller's own bid and
    aggregate statistics over every bid placed on that job.
    """
    caller.require_freelancer("Only freelancers can access this endpoint")
    my_bids = {
        bid.job_id: bid
        for bid in Bid.objects.filter(freelancer_id=caller.id)
    }
    jobs = (
        Job.objects
        .filter(pk__in=list(my_bids))
        .select_related('poster', 'selected_bid', 'selected_bid__freelancer')
        .prefetch_related('skills')
        .order_by('-created_at', '-id')
    )
    stats = {
        row['job_id']: row
        for row in (
            Bid.objects
            .filter(job_id__in=list(my_bids))
            .order_by()
            .values('job_id')
            .annotate(count=Count('id'), avg_amount=Avg('amount'), avg_delivery_time=Avg('delivery_time'))
        )
    }

    applications = []
    for job in jobs:
        row = stats.get(job.id, {})
        applications.append({
            'job': job,
            'my_bid': my_bids[job.id],
            'bid_stats': {
                'count': row.get('count', 0),
                'avg_amount': row.get('avg_amount') or 0,
                'avg_delivery_time': row.get('avg_delivery_time') or 0,
            },
        })
    return applications
