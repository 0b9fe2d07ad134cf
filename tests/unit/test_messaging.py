# tests/unit/test_messaging.py

import pytest

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.conversation import Conversation, Message
from app.services import messaging
from conftest import make_user


@pytest.fixture()
def pair(db):
    return make_user(db, "student"), make_user(db, "tutor")


def test_get_or_create_is_order_independent(db, pair):
    a, b = pair
    first = messaging.get_or_create_conversation(db, a.id, b.id)
    second = messaging.get_or_create_conversation(db, b.id, a.id)
    assert first.id == second.id
    assert db.query(Conversation).count() == 1
    assert first.participant_one_id < first.participant_two_id


def test_conversation_with_self_rejected(db, pair):
    a, _ = pair
    with pytest.raises(ValidationError):
        messaging.get_or_create_conversation(db, a.id, a.id)


def test_conversation_with_unknown_user(db, pair):
    a, _ = pair
    with pytest.raises(NotFound):
        messaging.get_or_create_conversation(db, a.id, 9999)


def test_send_sets_receiver_and_bumps_conversation(db, pair):
    a, b = pair
    conversation = messaging.get_or_create_conversation(db, a.id, b.id)
    opened_at = conversation.last_message_at

    message = messaging.send_message(db, conversation.id, b.id, "hello")

    assert message.receiver_id == a.id
    assert message.status == "sent"
    assert conversation.last_message_at >= opened_at


def test_outsider_cannot_send(db, pair):
    a, b = pair
    outsider = make_user(db, "student")
    conversation = messaging.get_or_create_conversation(db, a.id, b.id)
    with pytest.raises(Forbidden):
        messaging.send_message(db, conversation.id, outsider.id, "hi")


def test_mark_read_only_touches_incoming_and_is_idempotent(db, pair):
    a, b = pair
    conversation = messaging.get_or_create_conversation(db, a.id, b.id)
    to_a = messaging.send_message(db, conversation.id, b.id, "for a")
    to_b = messaging.send_message(db, conversation.id, a.id, "for b")
    messaging.mark_delivered(db, conversation.id, a.id)

    assert messaging.mark_read(db, conversation.id, a.id) == 1
    assert messaging.mark_read(db, conversation.id, a.id) == 0

    assert db.get(Message, to_a.id).status == "read"
    assert db.get(Message, to_b.id).status == "sent"


def test_mark_delivered_never_downgrades_read(db, pair):
    a, b = pair
    conversation = messaging.get_or_create_conversation(db, a.id, b.id)
    message = messaging.send_message(db, conversation.id, b.id, "hey")
    messaging.mark_read(db, conversation.id, a.id)

    assert messaging.mark_delivered(db, conversation.id, a.id) == 0
    assert db.get(Message, message.id).status == "read"


def test_list_conversations_newest_first(db, pair):
    a, b = pair
    c = make_user(db, "tutor")
    older = messaging.get_or_create_conversation(db, a.id, b.id)
    newer = messaging.get_or_create_conversation(db, a.id, c.id)
    messaging.send_message(db, newer.id, c.id, "latest")

    listed = messaging.list_conversations_for_user(db, a.id)

    assert [conv.id for conv, _ in listed] == [newer.id, older.id]
    assert listed[0][1].content == "latest"
    assert listed[1][1] is None


def test_list_messages_requires_participant(db, pair):
    a, b = pair
    conversation = messaging.get_or_create_conversation(db, a.id, b.id)
    messaging.send_message(db, conversation.id, a.id, "one")
    messaging.send_message(db, conversation.id, b.id, "two")

    assert [m.content for m in messaging.list_messages(db, conversation.id, a.id)] == ["one", "two"]
    with pytest.raises(Forbidden):
        messaging.list_messages(db, conversation.id, make_user(db, "student").id)
