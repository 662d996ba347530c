from rest_framework import serializers
from apps.users.serializers import UserSummarySerializer
from .models import Chat, Message


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = ['id', 'chat', 'sender', 'content', 'timestamp', 'read']
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False, allow_blank=True)


class ChatJobSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    status = serializers.CharField()


class ChatSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    other_participant = UserSummarySerializer()
    job = ChatJobSerializer()
    last_message = MessageSerializer(allow_null=True)
    unread_count = serializers.IntegerField()
    last_activity = serializers.DateTimeField()


class ChatDetailSerializer(serializers.ModelSerializer):
    job = ChatJobSerializer(read_only=True)
    job_poster = UserSummarySerializer(read_only=True)
    freelancer = UserSummarySerializer(read_only=True)
    messages = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = ['id', 'job', 'job_poster', 'freelancer', 'last_activity', 'created_at', 'messages']
        read_only_fields = fields

    def get_messages(self, obj):
        messages = obj.messages.select_related('sender').order_by('id')
        return MessageSerializer(messages, many=True).data
