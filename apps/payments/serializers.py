from rest_framework import serializers
from apps.users.serializers import UserSummarySerializer
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    payer = UserSummarySerializer(read_only=True)
    payee = UserSummarySerializer(read_only=True)
    job_title = serializers.CharField(source='job.title', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'job', 'job_title', 'bid', 'amount', 'payer', 'payee', 'status', 'created_at']
        read_only_fields = fields
