"""
Websocket consumer for live job conversations.

Clients connect to ``ws/chat/`` and send JSON frames:

- joinJobChat:      {"type": "joinJobChat", "jobId": 1}
- sendJobMessage:   {"type": "sendJobMessage", "jobId": 1, "content": "..."}
- markMessagesRead: {"type": "markMessagesRead", "jobId": 1}

Every frame is re-authorized against the job's accepted bid, so only the
poster and the hired freelancer can read or write the conversation.
"""

import json
import logging
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async

from core.exceptions import MarketplaceError, NotAuthorized
from . import services
from .serializers import MessageSerializer

logger = logging.getLogger(__name__)


def job_group_name(job_id):
    return f"job_{job_id}"


@database_sync_to_async
def _join(job_id, user_id):
    chat = services.chat_for_accepted_pair(job_id, user_id)
    return chat.job_id, MessageSerializer(services.recent_messages(chat), many=True).data


@database_sync_to_async
def _send(job_id, user_id, content):
    message = services.send_to_accepted_pair(job_id, user_id, content)
    return message.chat.job_id, MessageSerializer(message).data


@database_sync_to_async
def _mark_read(job_id, user_id):
    chat, updated = services.mark_read_for_accepted_pair(job_id, user_id)
    return chat.job_id, updated


class JobChatConsumer(AsyncWebsocketConsumer):

    async def connect(self):
        self.user = self.scope.get('user')
        if self.user is None or not self.user.is_authenticated:
            await self.close(code=4001)
            return
        self.groups_joined = set()
        await self.accept()
        logger.info(f"User {self.user.id} connected to job chat")

    async def disconnect(self, close_code):
        for group_name in getattr(self, 'groups_joined', set()):
            await self.channel_layer.group_discard(group_name, self.channel_name)

    async def send_json(self, payload):
        await self.send(text_data=json.dumps(payload))

    async def send_error(self, message):
        await self.send_json({'type': 'error', 'message': message})

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error('Invalid JSON')
            return
        if not isinstance(data, dict):
            await self.send_error('Invalid message format')
            return

        user_id = data.get('userId')
        if user_id is not None and str(user_id) != str(self.user.id):
            logger.warning(f"User {self.user.id} sent a frame claiming to be user {user_id}")
            await self.send_error('Not authorized')
            return

        handlers = {
            'joinJobChat': self.join_job_chat,
            'sendJobMessage': self.send_job_message,
            'markMessagesRead': self.mark_messages_read,
        }
        handler = handlers.get(data.get('type'))
        if handler is None:
            await self.send_error('Unknown message type')
            return

        try:
            await handler(data)
        except NotAuthorized as e:
            logger.warning(f"User {self.user.id} denied on job {data.get('jobId')}: {e.detail}")
            await self.send_error(str(e.detail))
        except MarketplaceError as e:
            await self.send_error(str(e.detail))
        except Exception as e:
            logger.error(f"Error handling {data.get('type')} for user {self.user.id}: {str(e)}", exc_info=e)
            await self.send_error('Server error')

    async def join_job_chat(self, data):
        # Group names use the resolved job id, never the raw frame value
        job_id, messages = await _join(data.get('jobId'), self.user.id)

        group_name = job_group_name(job_id)
        await self.channel_layer.group_add(group_name, self.channel_name)
        self.groups_joined.add(group_name)

        await self.send_json({'type': 'previousMessages', 'jobId': job_id, 'messages': messages})

    async def send_job_message(self, data):
        job_id, message = await _send(data.get('jobId'), self.user.id, data.get('content'))
        # The message is already stored; a failed fan-out must not undo it.
        try:
            await self.channel_layer.group_send(
                job_group_name(job_id),
                {'type': 'job.message', 'job_id': job_id, 'message': message}
            )
        except Exception as e:
            logger.error(f"Failed to broadcast message {message['id']} for job {job_id}: {str(e)}")

    async def mark_messages_read(self, data):
        job_id, updated = await _mark_read(data.get('jobId'), self.user.id)
        if not updated:
            return
        try:
            await self.channel_layer.group_send(
                job_group_name(job_id),
                {'type': 'messages.read', 'job_id': job_id, 'read_by': self.user.id}
            )
        except Exception as e:
            logger.error(f"Failed to broadcast read receipt for job {job_id}: {str(e)}")

    # ===== Group event handlers =====

    async def job_message(self, event):
        await self.send_json({
            'type': 'newJobMessage',
            'jobId': event['job_id'],
            'message': event['message'],
        })

    async def messages_read(self, event):
        if event['read_by'] == self.user.id:
            return
        await self.send_json({
            'type': 'messagesRead',
            'jobId': event['job_id'],
            'readBy': event['read_by'],
        })
