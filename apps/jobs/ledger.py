"""
Job lifecycle: creation, editing, cancellation, completion and listings.

    open --(bid accepted)--> in-progress --(poster completes)--> completed
    open --(poster closes)--> canceled

Acceptance lives in the bidding module; every other transition is here.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.payments.services import settle
from core.constants import (
    JOB_OPEN, JOB_IN_PROGRESS, JOB_COMPLETED, JOB_CANCELED,
    MIN_DEADLINE_DAYS, MAX_DEADLINE_DAYS,
)
from core.exceptions import InvalidState, NotAuthorized, NotFound, ValidationError, InternalError
from core.notifications import notify_payment_settled
from .models import Job, Bid

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('title', 'description', 'budget', 'deadline', 'skills_required')


def deadline_from_days(days):
    if isinstance(days, bool) or not isinstance(days, int) or not MIN_DEADLINE_DAYS <= days <= MAX_DEADLINE_DAYS:
        raise ValidationError(
            f"Deadline must be a number between {MIN_DEADLINE_DAYS} and {MAX_DEADLINE_DAYS} (days from today)"
        )
    return timezone.now() + timedelta(days=days)


def _validate_budget(budget):
    if budget is None or Decimal(budget) <= 0:
        raise ValidationError("Budget must be a positive number")
    return Decimal(budget)


def _clean_skills(skills):
    return [skill.strip() for skill in (skills or []) if skill and skill.strip()]


def get_job(job_id):
    try:
        return (
            Job.objects
            .select_related('poster', 'selected_bid', 'selected_bid__freelancer')
            .prefetch_related('skills')
            .get(pk=job_id)
        )
    except Job.DoesNotExist:
        raise NotFound("Job not found")


def _get_owned_job(job_id, caller, action, for_update=False):
    queryset = Job.objects.select_for_update() if for_update else Job.objects
    try:
        job = queryset.get(pk=job_id)
    except Job.DoesNotExist:
        raise NotFound("Job not found")
    if job.poster_id != caller.id:
        raise NotAuthorized(f"Not authorized to {action} this job")
    return job


def create_job(caller, title, description, budget, deadline_days, skills=None):
    if not caller.is_job_poster:
        raise ValidationError("Only job posters can create jobs")
    deadline = deadline_from_days(deadline_days)
    budget = _validate_budget(budget)

    with transaction.atomic():
        job = Job.objects.create(
            poster_id=caller.id,
            title=title,
            description=description,
            budget=budget,
            deadline=deadline,
            status=JOB_OPEN,
        )
        job.set_skills(_clean_skills(skills))
    logger.info(f"Job {job.id} created by user {caller.id}")
    return job


def update_job(job_id, caller, patch):
    """Apply a partial update. Only keys present in ``patch`` are touched."""
    unknown = set(patch) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown job fields: {', '.join(sorted(unknown))}")

    with transaction.atomic():
        job = _get_owned_job(job_id, caller, 'update', for_update=True)
        if job.status != JOB_OPEN:
            raise InvalidState("Cannot update job that is not open")

        if 'title' in patch:
            job.title = patch['title']
        if 'description' in patch:
            job.description = patch['description']
        if 'budget' in patch:
            job.budget = _validate_budget(patch['budget'])
        if 'deadline' in patch:
            job.deadline = deadline_from_days(patch['deadline'])
        job.save()

        if 'skills_required' in patch:
            job.set_skills(_clean_skills(patch['skills_required']))
    return job


def cancel_job(job_id, caller):
    with transaction.atomic():
        job = _get_owned_job(job_id, caller, 'cancel')
        updated = Job.objects.filter(pk=job.pk, status=JOB_OPEN).update(
            status=JOB_CANCELED, updated_at=timezone.now()
        )
        if not updated:
            raise InvalidState("Cannot cancel a job that is not open")
    job.refresh_from_db()
    logger.info(f"Job {job.id} canceled by user {caller.id}")
    return job


def complete_job(job_id, caller):
    """
    Mark an in-progress job as completed and settle its payment.

    The status flip is a compare-and-set on ``in-progress``, so of two
    concurrent calls only one reaches settlement; the loser gets InvalidState.
    """
    with transaction.atomic():
        job = _get_owned_job(job_id, caller, 'mark as completed')
        if job.status != JOB_IN_PROGRESS:
            raise InvalidState("Only jobs in progress can be marked as completed")
        if job.selected_bid_id is None:
            raise InvalidState("Cannot complete a job without an accepted bid")

        now = timezone.now()
        updated = Job.objects.filter(pk=job.pk, status=JOB_IN_PROGRESS).update(
            status=JOB_COMPLETED, completed_at=now, updated_at=now
        )
        if not updated:
            raise InvalidState("Only jobs in progress can be marked as completed")

        try:
            bid = Bid.objects.select_related('freelancer').get(pk=job.selected_bid_id)
        except Bid.DoesNotExist:
            raise InternalError(f"Selected bid {job.selected_bid_id} missing for job {job.id}")

        job.refresh_from_db()
        payment = settle(job, bid)
        notify_payment_settled(payment, job)

    logger.info(f"Job {job.id} completed by user {caller.id}")
    return job, payment


def filter_jobs(queryset, keyword=None, min_budget=None, max_budget=None, skills=None):
    """Narrow a job queryset; every given filter must match."""
    if keyword:
        queryset = queryset.filter(Q(title__icontains=keyword) | Q(description__icontains=keyword))
    if min_budget is not None:
        queryset = queryset.filter(budget__gte=min_budget)
    if max_budget is not None:
        queryset = queryset.filter(budget__lte=max_budget)
    skills = _clean_skills(skills)
    if skills:
        queryset = queryset.filter(pk__in=Job.objects.filter(skills__name__in=skills).values('pk'))
    return queryset


def _listing(queryset):
    return queryset.select_related('poster').prefetch_related('skills').order_by('-created_at', '-id')


def list_jobs(filters=None):
    filters = filters or {}
    status = filters.get('status') or JOB_OPEN
    queryset = filter_jobs(
        Job.objects.filter(status=status),
        keyword=filters.get('keyword'),
        min_budget=filters.get('min_budget'),
        max_budget=filters.get('max_budget'),
        skills=filters.get('skills'),
    )
    return _listing(queryset)


def list_open_jobs_for(caller, filters=None):
    """Open jobs a freelancer can still bid on: not their own, not already bid on."""
    caller.require_freelancer("Only freelancers can access this endpoint")
    filters = filters or {}
    already_bid = Bid.objects.filter(freelancer_id=caller.id).values('job_id')
    queryset = (
        Job.objects
        .filter(status=JOB_OPEN)
        .exclude(poster_id=caller.id)
        .exclude(pk__in=already_bid)
    )
    queryset = filter_jobs(
        queryset,
        keyword=filters.get('keyword'),
        min_budget=filters.get('min_budget'),
        max_budget=filters.get('max_budget'),
        skills=filters.get('skills'),
    )
    return _listing(queryset)


def list_posted_jobs(caller):
    caller.require_job_poster("Only job posters can access this endpoint")
    return _listing(Job.objects.filter(poster_id=caller.id))
