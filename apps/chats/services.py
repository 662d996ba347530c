import logging

from django.db import transaction
from django.db.models import Count, OuterRef, Q, Subquery
from django.utils import timezone

from apps.jobs.models import Job, Bid
from core.constants import BID_ACCEPTED, MAX_MESSAGE_LENGTH, RECENT_MESSAGES_LIMIT
from core.exceptions import NotAuthorized, NotFound, ValidationError
from .models import Chat, Message

logger = logging.getLogger(__name__)


def get_or_create_chat(job, freelancer_id):
    """Look up or create the conversation for a job and one freelancer.

    This is the only place chats are created, so a (job, freelancer) pair
    never ends up with two conversations.
    """
    chat, created = Chat.objects.get_or_create(
        job=job,
        freelancer_id=freelancer_id,
        defaults={'job_poster_id': job.poster_id},
    )
    if created:
        logger.info(f"Opened chat {chat.id} for job {job.id} with freelancer {freelancer_id}")
    return chat


def _load_chat_for(chat_id, caller):
    try:
        chat = Chat.objects.select_related('job', 'job_poster', 'freelancer').get(pk=chat_id)
    except Chat.DoesNotExist:
        raise NotFound("Chat not found")
    if not chat.is_participant(caller.id):
        raise NotAuthorized("Not authorized to access this chat")
    return chat


def _mark_read(chat, reader_id):
    return (
        Message.objects
        .filter(chat=chat, read=False)
        .exclude(sender_id=reader_id)
        .update(read=True)
    )


def add_message(chat, sender_id, content):
    content = (content or '').strip()
    if not content:
        raise ValidationError("Message content is required")
    if len(content) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message too long (max {MAX_MESSAGE_LENGTH} characters)")

    with transaction.atomic():
        message = Message.objects.create(
            chat=chat,
            sender_id=sender_id,
            content=content,
            timestamp=timezone.now(),
            read=False,
        )
        Chat.objects.filter(pk=chat.pk).update(last_activity=message.timestamp)
    chat.last_activity = message.timestamp
    return message


def list_chats_for(caller):
    """Conversations the caller takes part in, most recently active first."""
    last_message_id = Subquery(
        Message.objects.filter(chat=OuterRef('pk')).order_by('-id').values('id')[:1]
    )
    chats = list(
        Chat.objects
        .filter(Q(job_poster_id=caller.id) | Q(freelancer_id=caller.id))
        .select_related('job', 'job_poster', 'freelancer')
        .annotate(
            unread_count=Count(
                'messages',
                filter=Q(messages__read=False) & ~Q(messages__sender_id=caller.id),
            ),
            last_message_id=last_message_id,
        )
        .order_by('-last_activity', '-id')
    )
    last_messages = Message.objects.select_related('sender').in_bulk(
        [chat.last_message_id for chat in chats if chat.last_message_id]
    )

    summaries = []
    for chat in chats:
        other = chat.freelancer if caller.id == chat.job_poster_id else chat.job_poster
        summaries.append({
            'id': chat.id,
            'other_participant': other,
            'job': chat.job,
            'last_message': last_messages.get(chat.last_message_id),
            'unread_count': chat.unread_count,
            'last_activity': chat.last_activity,
        })
    return summaries


def get_chat(chat_id, caller):
    """Fetch a conversation and mark everything the other party sent as read."""
    chat = _load_chat_for(chat_id, caller)
    _mark_read(chat, caller.id)
    return chat


def append_message(chat_id, caller, content):
    chat = _load_chat_for(chat_id, caller)
    return add_message(chat, caller.id, content)


def mark_read(chat_id, caller):
    """Mark the other party's messages as read. Returns how many changed."""
    chat = _load_chat_for(chat_id, caller)
    return _mark_read(chat, caller.id)


def chat_for_accepted_pair(job_id, user_id):
    """
    Resolve the live conversation for a job on behalf of a realtime client.

    Access is derived from the job's accepted bid rather than from the chat's
    stored participants, so only the poster and the hired freelancer get in.
    """
    try:
        job = Job.objects.get(pk=job_id)
    except (Job.DoesNotExist, ValueError, TypeError):
        raise NotFound("Job not found")

    accepted_bid = Bid.objects.filter(job=job, status=BID_ACCEPTED).first()
    if accepted_bid is None:
        raise NotFound("No accepted bid found for this job")

    if user_id not in (job.poster_id, accepted_bid.freelancer_id):
        raise NotAuthorized("Not authorized to access this chat")

    chat = Chat.objects.filter(job=job, freelancer_id=accepted_bid.freelancer_id).first()
    if chat is None:
        raise NotFound("Chat not found for this job")
    return chat


def recent_messages(chat, limit=RECENT_MESSAGES_LIMIT):
    messages = list(
        Message.objects.filter(chat=chat).select_related('sender').order_by('-id')[:limit]
    )
    messages.reverse()
    return messages


def send_to_accepted_pair(job_id, user_id, content):
    chat = chat_for_accepted_pair(job_id, user_id)
    return add_message(chat, user_id, content)


def mark_read_for_accepted_pair(job_id, user_id):
    """Returns the resolved chat and how many messages changed."""
    chat = chat_for_accepted_pair(job_id, user_id)
    return chat, _mark_read(chat, user_id)
