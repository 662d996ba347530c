from decimal import Decimal

import pytest

from apps.chats.models import Chat, Message
from apps.jobs import bidding, ledger
from apps.jobs.models import Bid, Job
from core.constants import (
    JOB_IN_PROGRESS, JOB_COMPLETED, BID_PENDING, BID_ACCEPTED, BID_REJECTED,
)
from core.exceptions import DuplicateBid, InvalidState, NotAuthorized, NotFound, ValidationError
from .factories import BidFactory


class TestSubmitBid:

    def test_creates_pending_bid_and_chat(self, open_job, freelancer, poster, caller):
        bid = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('450.00'), 4, '  Experienced dev  ')

        assert bid.status == BID_PENDING
        assert bid.proposal == 'Experienced dev'
        chat = Chat.objects.get(job=open_job, freelancer=freelancer)
        assert chat.job_poster_id == poster.id
        assert chat.messages.count() == 0

    def test_second_bid_from_same_freelancer_is_duplicate(self, open_job, freelancer, caller):
        bidding.submit_bid(open_job.id, caller(freelancer), Decimal('450'), 4, 'First')

        with pytest.raises(DuplicateBid):
            bidding.submit_bid(open_job.id, caller(freelancer), Decimal('300'), 2, 'Second')
        assert Bid.objects.filter(job=open_job, freelancer=freelancer).count() == 1
        assert Chat.objects.filter(job=open_job, freelancer=freelancer).count() == 1

    def test_duplicate_that_slips_past_the_check(self, open_job, freelancer, caller, monkeypatch):
        bidding.submit_bid(open_job.id, caller(freelancer), Decimal('450'), 4, 'First')
        monkeypatch.setattr(bidding, '_has_bid', lambda *args: False)

        with pytest.raises(DuplicateBid):
            bidding.submit_bid(open_job.id, caller(freelancer), Decimal('300'), 2, 'Second')
        assert Bid.objects.filter(job=open_job, freelancer=freelancer).count() == 1
        assert Chat.objects.filter(job=open_job, freelancer=freelancer).count() == 1

    def test_job_poster_cannot_bid(self, open_job, other_poster, caller):
        with pytest.raises(NotAuthorized):
            bidding.submit_bid(open_job.id, caller(other_poster), Decimal('450'), 4, 'Proposal')

    def test_missing_job(self, freelancer, caller):
        with pytest.raises(NotFound):
            bidding.submit_bid(123456, caller(freelancer), Decimal('450'), 4, 'Proposal')

    @pytest.mark.parametrize('amount,delivery_time,proposal', [
        (Decimal('0'), 3, 'Proposal'),
        (Decimal('-5'), 3, 'Proposal'),
        (Decimal('100'), 0, 'Proposal'),
        (Decimal('100'), 3, '   '),
    ])
    def test_invalid_terms(self, open_job, freelancer, caller, amount, delivery_time, proposal):
        with pytest.raises(ValidationError):
            bidding.submit_bid(open_job.id, caller(freelancer), amount, delivery_time, proposal)

    def test_cannot_bid_once_job_is_in_progress(self, accepted_job, freelancer3, caller):
        with pytest.raises(InvalidState):
            bidding.submit_bid(accepted_job['job'].id, caller(freelancer3), Decimal('100'), 1, 'Late')

    def test_cannot_bid_on_canceled_job(self, open_job, poster, freelancer, caller):
        ledger.cancel_job(open_job.id, caller(poster))
        with pytest.raises(InvalidState):
            bidding.submit_bid(open_job.id, caller(freelancer), Decimal('100'), 1, 'Late')


class TestAcceptBid:

    def test_accept_cascades(self, accepted_job, freelancer, poster):
        job, bid, losing = accepted_job['job'], accepted_job['bid'], accepted_job['losing_bid']

        losing.refresh_from_db()
        assert bid.status == BID_ACCEPTED
        assert losing.status == BID_REJECTED
        assert job.status == JOB_IN_PROGRESS
        assert job.selected_bid_id == bid.id
        assert Bid.objects.filter(job=job, status=BID_ACCEPTED).count() == 1
        assert Bid.objects.filter(job=job, status=BID_PENDING).count() == 0

    def test_accept_posts_congratulation_from_poster(self, accepted_job, freelancer, poster):
        chat = accepted_job['chat']

        assert chat.freelancer_id == freelancer.id
        assert Chat.objects.filter(job=accepted_job['job'], freelancer=freelancer).count() == 1
        message = Message.objects.get(chat=chat)
        assert message.sender_id == poster.id
        assert 'Build a landing page' in message.content
        assert message.read is False

    def test_second_acceptance_is_rejected(self, accepted_job, poster, caller):
        with pytest.raises(InvalidState):
            bidding.accept_bid(accepted_job['losing_bid'].id, caller(poster))

        job = Job.objects.get(pk=accepted_job['job'].id)
        assert job.selected_bid_id == accepted_job['bid'].id

    def test_racing_acceptance_with_stale_read(self, open_job, freelancer, freelancer2, poster, caller, monkeypatch):
        first = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'First')
        second = bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('420'), 3, 'Second')
        stale = (Bid.objects.get(pk=second.id), Job.objects.get(pk=open_job.id))

        bidding.accept_bid(first.id, caller(poster))

        monkeypatch.setattr(bidding, '_get_bid_for_poster', lambda *args: stale)
        with pytest.raises(InvalidState):
            bidding.accept_bid(second.id, caller(poster))

        job = Job.objects.get(pk=open_job.id)
        assert job.selected_bid_id == first.id
        assert Bid.objects.get(pk=second.id).status == BID_REJECTED
        assert Bid.objects.filter(job=job, status=BID_ACCEPTED).count() == 1

    def test_only_job_owner_can_accept(self, open_job, freelancer, other_poster, caller):
        bid = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'Proposal')
        with pytest.raises(NotAuthorized):
            bidding.accept_bid(bid.id, caller(other_poster))

    def test_missing_bid(self, poster, caller):
        with pytest.raises(NotFound):
            bidding.accept_bid(424242, caller(poster))


class TestRejectBid:

    def test_reject_pending_bid(self, open_job, freelancer, poster, caller):
        bid = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'Proposal')

        rejected = bidding.reject_bid(bid.id, caller(poster))

        assert rejected.status == BID_REJECTED
        assert Job.objects.get(pk=open_job.id).status == 'open'
        with pytest.raises(InvalidState):
            bidding.reject_bid(bid.id, caller(poster))

    def test_rejected_bid_cannot_be_accepted(self, open_job, freelancer, poster, caller):
        bid = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'Proposal')
        bidding.reject_bid(bid.id, caller(poster))

        with pytest.raises(InvalidState):
            bidding.accept_bid(bid.id, caller(poster))


class TestBidListings:

    def test_bids_for_job_newest_first(self, open_job, freelancer, freelancer2, poster, caller):
        first = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'First')
        second = bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('420'), 3, 'Second')

        assert [bid.id for bid in bidding.list_bids_for_job(open_job.id, caller(poster))] == [second.id, first.id]

    def test_bids_for_job_requires_owner(self, open_job, other_poster, caller):
        with pytest.raises(NotAuthorized):
            bidding.list_bids_for_job(open_job.id, caller(other_poster))

    def test_my_bids(self, open_job, freelancer, freelancer2, caller):
        mine = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'Mine')
        bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('420'), 3, 'Theirs')

        assert [bid.id for bid in bidding.list_my_bids(caller(freelancer))] == [mine.id]

    def test_my_applications_include_stats(self, open_job, freelancer, freelancer2, freelancer3, caller):
        bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 2, 'Mine')
        bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('500'), 4, 'Second')
        BidFactory(freelancer=freelancer3, amount=Decimal('50'))

        applications = bidding.list_my_applications(caller(freelancer))

        assert len(applications) == 1
        application = applications[0]
        assert application['job'].id == open_job.id
        assert application['my_bid'].amount == Decimal('400')
        assert application['bid_stats']['count'] == 2
        assert Decimal(str(application['bid_stats']['avg_amount'])) == Decimal('450')
        assert float(application['bid_stats']['avg_delivery_time']) == 3.0


def test_full_marketplace_scenario(poster, freelancer, freelancer2, freelancer3, caller):
    """One poster, two bidders: the accepted bid is paid and latecomers are turned away."""
    job = ledger.create_job(caller(poster), 'Data pipeline', 'ETL work', Decimal('500'), 7, skills=['python'])
    bid1 = bidding.submit_bid(job.id, caller(freelancer), Decimal('400'), 5, 'F1 proposal')
    bid2 = bidding.submit_bid(job.id, caller(freelancer2), Decimal('450'), 6, 'F2 proposal')

    bidding.accept_bid(bid1.id, caller(poster))
    bid2.refresh_from_db()
    assert bid2.status == BID_REJECTED

    with pytest.raises(InvalidState):
        bidding.submit_bid(job.id, caller(freelancer3), Decimal('100'), 1, 'Too late')

    job, payment = ledger.complete_job(job.id, caller(poster))
    assert job.status == JOB_COMPLETED
    assert payment.amount == Decimal('400')

    freelancer.freelancer.refresh_from_db()
    freelancer2.freelancer.refresh_from_db()
    poster.job_poster.refresh_from_db()
    assert freelancer.freelancer.money_earned == Decimal('400')
    assert freelancer2.freelancer.money_earned == Decimal('0')
    assert poster.job_poster.money_spent == Decimal('400')
