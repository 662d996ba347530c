from django.db import models
from django.conf import settings
from django.utils import timezone


class Chat(models.Model):
    """Conversation between a job's poster and one freelancer who bid on it."""
    job = models.ForeignKey('jobs.Job', on_delete=models.CASCADE, related_name='chats')
    job_poster = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='poster_chats'
    )
    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='freelancer_chats'
    )
    last_activity = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-last_activity', '-id']
        constraints = [
            models.UniqueConstraint(fields=['job', 'freelancer'], name='one_chat_per_job_pair'),
        ]

    def __str__(self):
        return f"Chat on {self.job.title} between {self.job_poster.username} and {self.freelancer.username}"

    @property
    def participant_ids(self):
        return {self.job_poster_id, self.freelancer_id}

    def is_participant(self, user_id):
        return user_id in self.participant_ids


class Message(models.Model):
    chat = models.ForeignKey(Chat, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='chat_messages')
    content = models.TextField()
    timestamp = models.DateTimeField(default=timezone.now)
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"Message from {self.sender.username} at {self.timestamp}"
