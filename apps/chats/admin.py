from django.contrib import admin
from .models import Chat, Message

@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ('job', 'job_poster', 'freelancer', 'last_activity')
    search_fields = ('job__title', 'job_poster__username', 'freelancer__username')

@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('chat', 'sender', 'timestamp', 'read')
    list_filter = ('read',)
