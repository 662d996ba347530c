from django.db import models
from django.conf import settings
from core.constants import (
    JOB_STATUS_CHOICES, BID_STATUS_CHOICES,
    JOB_OPEN, JOB_IN_PROGRESS, JOB_COMPLETED, BID_PENDING, BID_ACCEPTED,
)


class Job(models.Model):
    poster = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='jobs')
    title = models.CharField(max_length=200)
    description = models.TextField()
    budget = models.DecimalField(max_digits=12, decimal_places=2)
    deadline = models.DateTimeField()
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default=JOB_OPEN)
    selected_bid = models.OneToOneField(
        'Bid', on_delete=models.PROTECT, null=True, blank=True, related_name='selected_for'
    )
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status__in=[JOB_IN_PROGRESS, JOB_COMPLETED], selected_bid__isnull=False)
                    | (~models.Q(status__in=[JOB_IN_PROGRESS, JOB_COMPLETED]) & models.Q(selected_bid__isnull=True))
                ),
                name='job_selected_bid_matches_status',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status=JOB_COMPLETED, completed_at__isnull=False)
                    | (~models.Q(status=JOB_COMPLETED) & models.Q(completed_at__isnull=True))
                ),
                name='job_completed_at_matches_status',
            ),
        ]

    def __str__(self):
        return f"{self.title} - {self.poster.username}"

    @property
    def skill_names(self):
        return [skill.name for skill in self.skills.all()]

    def set_skills(self, names):
        """Replace the job's required skills with the given names."""
        self.skills.all().delete()
        JobSkill.objects.bulk_create(
            [JobSkill(job=self, name=name) for name in dict.fromkeys(names)]
        )


class JobSkill(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='skills')
    name = models.CharField(max_length=100)

    class Meta:
        unique_together = ('job', 'name')

    def __str__(self):
        return self.name


class Bid(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='bids')
    freelancer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bids')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    delivery_time = models.PositiveIntegerField(help_text='Delivery time in days')
    proposal = models.TextField()
    status = models.CharField(max_length=20, choices=BID_STATUS_CHOICES, default=BID_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['job', 'freelancer'], name='one_bid_per_freelancer_per_job'),
            models.UniqueConstraint(
                fields=['job'], condition=models.Q(status=BID_ACCEPTED), name='one_accepted_bid_per_job'
            ),
        ]

    def __str__(self):
        return f"{self.freelancer.username} bid {self.amount} on {self.job.title}"
