from decimal import Decimal

from rest_framework import serializers
from apps.users.serializers import UserSummarySerializer
from core.constants import JOB_STATUS_CHOICES, MIN_DEADLINE_DAYS, MAX_DEADLINE_DAYS
from .models import Job, Bid


class SkillListField(serializers.ListField):
    child = serializers.CharField(max_length=100, allow_blank=False, trim_whitespace=True)


class JobSerializer(serializers.ModelSerializer):
    poster = UserSummarySerializer(read_only=True)
    skills_required = serializers.SerializerMethodField()
    selected_bid = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'description', 'budget', 'deadline', 'skills_required',
            'poster', 'status', 'selected_bid', 'completed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_skills_required(self, obj):
        return obj.skill_names


class JobCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    budget = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    deadline = serializers.IntegerField(
        min_value=MIN_DEADLINE_DAYS,
        max_value=MAX_DEADLINE_DAYS,
        error_messages={
            'min_value': f"Deadline must be a number between {MIN_DEADLINE_DAYS} and {MAX_DEADLINE_DAYS}",
            'max_value': f"Deadline must be a number between {MIN_DEADLINE_DAYS} and {MAX_DEADLINE_DAYS}",
        }
    )
    skills_required = SkillListField(required=False, default=list)


class JobUpdateSerializer(JobCreateSerializer):
    """Every field optional; ``validated_data`` only holds the keys the client sent."""

    def __init__(self, *args, **kwargs):
        kwargs['partial'] = True
        super().__init__(*args, **kwargs)
        self.fields['skills_required'] = SkillListField(required=False)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError("Provide at least one field to update.")
        return data


class JobFilterSerializer(serializers.Serializer):
    keyword = serializers.CharField(required=False, allow_blank=True)
    minBudget = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, source='min_budget')
    maxBudget = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, source='max_budget')
    skills = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=JOB_STATUS_CHOICES, required=False)

    def validate_skills(self, value):
        return [skill.strip() for skill in value.split(',') if skill.strip()]

    def validate(self, data):
        low, high = data.get('min_budget'), data.get('max_budget')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError("minBudget cannot be greater than maxBudget.")
        return data


class BidSerializer(serializers.ModelSerializer):
    freelancer = UserSummarySerializer(read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'job', 'freelancer', 'amount', 'delivery_time', 'proposal', 'status', 'created_at']
        read_only_fields = fields


class BidJobSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Job
        fields = ['id', 'title', 'budget', 'deadline', 'status']
        read_only_fields = fields


class MyBidSerializer(BidSerializer):
    job = BidJobSummarySerializer(read_only=True)

    class Meta(BidSerializer.Meta):
        fields = ['id', 'job', 'amount', 'delivery_time', 'proposal', 'status', 'created_at']
        read_only_fields = fields


class BidApplySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    delivery_time = serializers.IntegerField(min_value=1)
    proposal = serializers.CharField()


class BidCreateSerializer(BidApplySerializer):
    job_id = serializers.IntegerField()


class BidSnapshotSerializer(serializers.ModelSerializer):
    submitted_at = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'amount', 'delivery_time', 'proposal', 'status', 'submitted_at']
        read_only_fields = fields


class BidStatsSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    avg_amount = serializers.FloatField()
    avg_delivery_time = serializers.FloatField()


class SelectedBidSerializer(BidSerializer):
    class Meta(BidSerializer.Meta):
        fields = ['id', 'freelancer', 'amount', 'delivery_time', 'status']
        read_only_fields = fields


class ApplicationSerializer(serializers.Serializer):
    """A job the freelancer bid on, their own bid, and how the competition looks."""
    job = JobSerializer()
    selected_bid = serializers.SerializerMethodField()
    my_bid = BidSnapshotSerializer()
    bid_stats = BidStatsSerializer()

    def get_selected_bid(self, obj):
        selected = obj['job'].selected_bid
        return SelectedBidSerializer(selected).data if selected else None


class BidDecisionSerializer(serializers.Serializer):
    message = serializers.CharField()
    bid = BidSerializer()
    job = JobSerializer(required=False)
    chat_id = serializers.IntegerField(required=False)
