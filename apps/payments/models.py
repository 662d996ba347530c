from django.db import models
from django.conf import settings
from core.constants import PAYMENT_STATUS_CHOICES, PAYMENT_PENDING


class Payment(models.Model):
    """Ledger record of the money moved when a job is completed. Never updated after creation."""
    job = models.OneToOneField('jobs.Job', on_delete=models.PROTECT, related_name='payment')
    bid = models.OneToOneField('jobs.Bid', on_delete=models.PROTECT, related_name='payment')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='payments_made'
    )
    payee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='payments_received'
    )
    status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Payment {self.amount} for Job {self.job.title}"
