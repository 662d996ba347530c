from decimal import Decimal

import pytest

from apps.chats import services
from apps.chats.models import Chat, Message
from apps.jobs import bidding
from core.constants import MAX_MESSAGE_LENGTH
from core.exceptions import NotAuthorized, NotFound, ValidationError


@pytest.fixture
def chat(accepted_job):
    return accepted_job['chat']


def test_get_or_create_chat_is_idempotent(open_job, freelancer):
    first = services.get_or_create_chat(open_job, freelancer.id)
    second = services.get_or_create_chat(open_job, freelancer.id)

    assert first.id == second.id
    assert Chat.objects.filter(job=open_job, freelancer=freelancer).count() == 1


class TestAppendMessage:

    def test_appends_and_bumps_activity(self, chat, freelancer, caller):
        before = Chat.objects.get(pk=chat.id).last_activity

        message = services.append_message(chat.id, caller(freelancer), '  Thanks!  ')

        assert message.content == 'Thanks!'
        assert message.sender_id == freelancer.id
        assert message.read is False
        assert Chat.objects.get(pk=chat.id).last_activity >= before

    def test_non_participant_is_rejected(self, chat, freelancer2, caller):
        with pytest.raises(NotAuthorized):
            services.append_message(chat.id, caller(freelancer2), 'Let me in')

    @pytest.mark.parametrize('content', ['', '   ', None, 'x' * (MAX_MESSAGE_LENGTH + 1)])
    def test_invalid_content(self, chat, freelancer, caller, content):
        with pytest.raises(ValidationError):
            services.append_message(chat.id, caller(freelancer), content)

    def test_message_at_length_limit_is_accepted(self, chat, freelancer, caller):
        message = services.append_message(chat.id, caller(freelancer), 'x' * MAX_MESSAGE_LENGTH)
        assert len(message.content) == MAX_MESSAGE_LENGTH

    def test_missing_chat(self, freelancer, caller):
        with pytest.raises(NotFound):
            services.append_message(987654, caller(freelancer), 'hello')


class TestReadState:

    def test_unread_count_excludes_own_messages(self, chat, poster, freelancer, caller):
        services.append_message(chat.id, caller(poster), 'Second note from poster')
        services.append_message(chat.id, caller(freelancer), 'Reply')

        poster_view = services.list_chats_for(caller(poster))
        freelancer_view = services.list_chats_for(caller(freelancer))

        assert poster_view[0]['unread_count'] == 1
        assert freelancer_view[0]['unread_count'] == 2
        assert freelancer_view[0]['last_message'].content == 'Reply'
        assert freelancer_view[0]['other_participant'].id == poster.id

    def test_mark_read_returns_count_then_zero(self, chat, freelancer, caller):
        assert services.mark_read(chat.id, caller(freelancer)) == 1
        assert services.mark_read(chat.id, caller(freelancer)) == 0
        assert services.list_chats_for(caller(freelancer))[0]['unread_count'] == 0

    def test_get_chat_marks_other_party_messages_read(self, chat, poster, freelancer, caller):
        services.append_message(chat.id, caller(freelancer), 'Unread by poster')

        services.get_chat(chat.id, caller(freelancer))

        assert Message.objects.get(chat=chat, sender=poster).read is True
        assert Message.objects.get(chat=chat, sender=freelancer).read is False

    def test_get_chat_requires_participant(self, chat, other_poster, caller):
        with pytest.raises(NotAuthorized):
            services.get_chat(chat.id, caller(other_poster))


def test_chats_ordered_by_latest_activity(open_job, poster, freelancer, freelancer2, caller):
    bidding.submit_bid(open_job.id, caller(freelancer), Decimal('400'), 3, 'One')
    bidding.submit_bid(open_job.id, caller(freelancer2), Decimal('410'), 3, 'Two')
    older = Chat.objects.get(job=open_job, freelancer=freelancer)

    services.append_message(older.id, caller(freelancer), 'Bumping this one')

    chats = services.list_chats_for(caller(poster))
    assert [summary['id'] for summary in chats][0] == older.id
    assert len(chats) == 2
    assert chats[1]['last_message'] is None


class TestAcceptedPair:

    def test_resolves_chat_for_both_parties(self, accepted_job, poster, freelancer):
        job_id = accepted_job['job'].id

        assert services.chat_for_accepted_pair(job_id, poster.id).id == accepted_job['chat'].id
        assert services.chat_for_accepted_pair(job_id, freelancer.id).id == accepted_job['chat'].id

    def test_losing_bidder_is_not_authorized(self, accepted_job, freelancer2):
        with pytest.raises(NotAuthorized):
            services.chat_for_accepted_pair(accepted_job['job'].id, freelancer2.id)

    def test_job_without_accepted_bid(self, open_job, poster):
        with pytest.raises(NotFound):
            services.chat_for_accepted_pair(open_job.id, poster.id)

    @pytest.mark.parametrize('job_id', [999999, 'abc', None])
    def test_unknown_job(self, poster, job_id):
        with pytest.raises(NotFound):
            services.chat_for_accepted_pair(job_id, poster.id)

    def test_recent_messages_are_oldest_first_and_capped(self, accepted_job, poster, caller):
        chat = accepted_job['chat']
        for i in range(5):
            services.append_message(chat.id, caller(poster), f"note {i}")

        messages = services.recent_messages(chat, limit=3)

        assert [m.content for m in messages] == ['note 2', 'note 3', 'note 4']

    def test_send_and_mark_read(self, accepted_job, poster, freelancer):
        job_id = accepted_job['job'].id
        services.send_to_accepted_pair(job_id, freelancer.id, 'Started work')

        chat, updated = services.mark_read_for_accepted_pair(job_id, poster.id)
        assert chat.id == accepted_job['chat'].id
        assert updated == 1
        assert services.mark_read_for_accepted_pair(job_id, freelancer.id)[1] == 1
