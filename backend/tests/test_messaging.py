import pytest

from app.errors import ForbiddenError, NotFoundError, ValidationError
from app.services.messaging import MessageRouter


def test_send_persists_and_pushes_to_live_channel(storage, registry, make_user, channel_factory):
    sender = make_user("employer", full_name="Dana Ortiz")
    recipient = make_user("worker")
    channel = channel_factory()
    registry.register(recipient.id, channel)

    result = MessageRouter(storage, registry).send_message(sender.id, recipient.id, "Can you start Monday?")

    assert result.delivered is True
    assert storage.get_message(result.message.id).content == "Can you start Monday?"
    assert result.notification.title == "New Message"
    assert result.notification.type == "message"
    assert result.notification.related_id == result.message.id
    assert result.notification.content == "You have a new message from Dana Ortiz"
    assert channel.payloads == [
        {
            "type": "new_message",
            "fromUserId": sender.id,
            "messageId": result.message.id,
            "fromName": "Dana Ortiz",
        }
    ]


def test_send_to_offline_user_is_stored_only(storage, registry, make_user):
    sender = make_user("worker")
    recipient = make_user("employer")

    result = MessageRouter(storage, registry).send_message(sender.id, recipient.id, "Hello")

    assert result.delivered is False
    assert [n.id for n in storage.list_notifications_by_user(recipient.id)] == [result.notification.id]


def test_send_validates_content_and_recipient(storage, registry, make_user):
    sender = make_user("worker")
    recipient = make_user("employer")
    router = MessageRouter(storage, registry, max_message_length=10)

    with pytest.raises(ValidationError):
        router.send_message(sender.id, recipient.id, "   ")
    with pytest.raises(ValidationError):
        router.send_message(sender.id, recipient.id, "x" * 11)
    with pytest.raises(NotFoundError):
        router.send_message(sender.id, 9999, "hi")

    assert storage.list_messages_by_user(sender.id) == []


def test_conversation_and_inbox_ordering(storage, registry, make_user):
    alice = make_user("worker")
    bob = make_user("employer")
    carol = make_user("employer")
    router = MessageRouter(storage, registry)

    first = router.send_message(alice.id, bob.id, "one").message
    second = router.send_message(bob.id, alice.id, "two").message
    other = router.send_message(carol.id, alice.id, "three").message

    assert [m.id for m in router.get_conversation(alice.id, bob.id)] == [first.id, second.id]
    assert [m.id for m in router.list_user_messages(alice.id)] == [other.id, second.id, first.id]
    assert [n.related_id for n in router.list_notifications(alice.id)] == [other.id, second.id]


def test_mark_read_is_idempotent_and_owner_only(storage, registry, make_user):
    sender = make_user("worker")
    recipient = make_user("employer")
    router = MessageRouter(storage, registry)
    result = router.send_message(sender.id, recipient.id, "ping")

    with pytest.raises(ForbiddenError):
        router.mark_message_read(result.message.id, actor_id=sender.id)
    assert router.mark_message_read(result.message.id, actor_id=recipient.id).is_read is True
    assert router.mark_message_read(result.message.id, actor_id=recipient.id).is_read is True

    with pytest.raises(ForbiddenError):
        router.mark_notification_read(result.notification.id, actor_id=sender.id)
    assert router.mark_notification_read(result.notification.id, actor_id=recipient.id).is_read is True
    assert router.mark_notification_read(result.notification.id).is_read is True

    with pytest.raises(NotFoundError):
        router.mark_message_read(9999)
    with pytest.raises(NotFoundError):
        router.mark_notification_read(9999)


def test_notify_system_stores_and_pushes(storage, registry, make_user, channel_factory):
    worker = make_user("worker")
    channel = channel_factory()
    registry.register(worker.id, channel)

    notification = MessageRouter(storage, registry).notify_system(
        worker.id, "Application Update", "Your application is now accepted", related_id=7
    )

    assert notification.type == "system"
    assert channel.payloads == [
        {"type": "notification", "notificationId": notification.id, "title": "Application Update", "relatedId": 7}
    ]
    with pytest.raises(NotFoundError):
        MessageRouter(storage, registry).notify_system(9999, "t", "c")
