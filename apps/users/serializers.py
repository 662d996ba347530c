from rest_framework import serializers
from django.contrib.auth import get_user_model
from core.constants import JOB_POSTER, FREELANCER

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Public projection of an account used inside job, bid and chat payloads."""
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = ['id', 'username', 'full_name', 'email']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()
    full_name = serializers.ReadOnlyField()
    skills = serializers.SerializerMethodField()
    money_earned = serializers.SerializerMethodField()
    money_spent = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'first_name', 'last_name', 'full_name', 'email',
            'phone_number', 'role', 'skills', 'money_earned', 'money_spent'
        ]
        read_only_fields = fields

    def get_role(self, obj):
        if obj.is_job_poster:
            return JOB_POSTER
        if obj.is_freelancer:
            return FREELANCER
        return None

    def get_skills(self, obj):
        if not obj.is_freelancer:
            return []
        return list(obj.freelancer.skills.values_list('name', flat=True))

    def get_money_earned(self, obj):
        return str(obj.freelancer.money_earned) if obj.is_freelancer else None

    def get_money_spent(self, obj):
        return str(obj.job_poster.money_spent) if obj.is_job_poster else None
