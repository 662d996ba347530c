"""
Shared fixtures: role accounts, their callers, and DRF API clients.
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.jobs import bidding, ledger
from core.callers import AuthenticatedCaller
from .factories import JobPosterFactory, FreelancerFactory


@pytest.fixture
def poster(db):
    return JobPosterFactory(user__username='poster').user


@pytest.fixture
def other_poster(db):
    return JobPosterFactory(user__username='other_poster').user


@pytest.fixture
def freelancer(db):
    return FreelancerFactory(user__username='freelancer1').user


@pytest.fixture
def freelancer2(db):
    return FreelancerFactory(user__username='freelancer2').user


@pytest.fixture
def freelancer3(db):
    return FreelancerFactory(user__username='freelancer3').user


@pytest.fixture
def caller():
    """Build the AuthenticatedCaller for a user."""
    return AuthenticatedCaller.from_user


@pytest.fixture
def open_job(poster, caller):
    return ledger.create_job(
        caller(poster),
        title='Build a landing page',
        description='Responsive landing page for a product launch',
        budget=Decimal('500.00'),
        deadline_days=5,
        skills=['html', 'css'],
    )


@pytest.fixture
def accepted_job(open_job, freelancer, freelancer2, poster, caller):
    """Job with two bids where the first freelancer's bid was accepted."""
    winning = bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400.00'), 3, 'I can do it')
    losing = bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('450.00'), 4, 'Me too')
    bid, job, chat = bidding.accept_bid(winning.id, caller(poster))
    return {'job': job, 'bid': bid, 'losing_bid': losing, 'chat': chat}


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for(api_client):
    """Return an APIClient authenticated as the given user."""
    def _client_for(user):
        api_client.force_authenticate(user=user)
        return api_client
    return _client_for
