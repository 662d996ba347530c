from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone
from factory.django import DjangoModelFactory

from core.constants import JOB_OPEN, BID_PENDING


class UserFactory(DjangoModelFactory):

    class Meta:
        model = 'users.User'
        django_get_or_create = ('username',)

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.django.Password('testpass123')
    is_active = True


class JobPosterFactory(DjangoModelFactory):

    class Meta:
        model = 'users.JobPoster'

    user = factory.SubFactory(UserFactory)
    company_name = factory.Faker('company')


class FreelancerFactory(DjangoModelFactory):

    class Meta:
        model = 'users.Freelancer'

    user = factory.SubFactory(UserFactory)
    bio = factory.Faker('sentence')


class JobFactory(DjangoModelFactory):
    """Open job with no skills. Use ``ledger.create_job`` when skills matter."""

    class Meta:
        model = 'jobs.Job'

    poster = factory.LazyAttribute(lambda o: JobPosterFactory().user)
    title = factory.Sequence(lambda n: f"Job {n}")
    description = factory.Faker('paragraph')
    budget = Decimal('500.00')
    deadline = factory.LazyFunction(lambda: timezone.now() + timedelta(days=5))
    status = JOB_OPEN


class BidFactory(DjangoModelFactory):

    class Meta:
        model = 'jobs.Bid'

    job = factory.SubFactory(JobFactory)
    freelancer = factory.LazyAttribute(lambda o: FreelancerFactory().user)
    amount = Decimal('400.00')
    delivery_time = 3
    proposal = factory.Faker('sentence')
    status = BID_PENDING
