from __future__ import annotations

from dataclasses import dataclass

from app.errors import ForbiddenError, NotFoundError, ValidationError
from app.logging_config import get_logger
from app.schemas.message import NOTIFICATION_MESSAGE, NOTIFICATION_SYSTEM, MessageRecord, NotificationRecord
from app.services.connections import ConnectionRegistry
from app.storage.base import Storage


logger = get_logger(__name__)

DEFAULT_MAX_MESSAGE_LENGTH = 4000


@dataclass(frozen=True)
class SendResult:
    message: MessageRecord
    notification: NotificationRecord
    delivered: bool


class MessageRouter:
    """Persists messages and notifications, then pushes them to live channels.

    Persistence always happens first; live delivery is best effort and a
    recipient without open channels simply picks the message up later.
    """

    def __init__(
        self,
        storage: Storage,
        registry: ConnectionRegistry,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
    ) -> None:
        self.storage = storage
        self.registry = registry
        self.max_message_length = max_message_length

    def send_message(self, from_user_id: int, to_user_id: int, content: str) -> SendResult:
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Message content is required", fields=["content"])
        if len(content) > self.max_message_length:
            raise ValidationError(
                f"Message exceeds {self.max_message_length} characters",
                fields=["content"],
            )

        recipient = self.storage.get_user(to_user_id)
        if recipient is None:
            raise NotFoundError("Recipient not found")
        sender = self.storage.get_user(from_user_id)
        sender_name = sender.full_name if sender else "another user"

        message = self.storage.create_message(
            {"from_user_id": from_user_id, "to_user_id": to_user_id, "content": content}
        )
        notification = self.storage.create_notification(
            {
                "user_id": to_user_id,
                "title": "New Message",
                "content": f"You have a new message from {sender_name}",
                "type": NOTIFICATION_MESSAGE,
                "related_id": message.id,
            }
        )

        delivered = self.registry.notify(
            to_user_id,
            {
                "type": "new_message",
                "fromUserId": from_user_id,
                "messageId": message.id,
                "fromName": sender_name,
            },
        )
        logger.info(
            "message_sent",
            message_id=message.id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            delivered=delivered,
        )
        return SendResult(message=message, notification=notification, delivered=delivered)

    def notify_system(
        self,
        user_id: int,
        title: str,
        content: str,
        related_id: int | None = None,
    ) -> NotificationRecord:
        if self.storage.get_user(user_id) is None:
            raise NotFoundError("User not found")
        notification = self.storage.create_notification(
            {
                "user_id": user_id,
                "title": title,
                "content": content,
                "type": NOTIFICATION_SYSTEM,
                "related_id": related_id,
            }
        )
        self.registry.notify(
            user_id,
            {
                "type": "notification",
                "notificationId": notification.id,
                "title": title,
                "relatedId": related_id,
            },
        )
        return notification

    def mark_message_read(self, message_id: int, actor_id: int | None = None) -> MessageRecord:
        message = self.storage.get_message(message_id)
        if message is None:
            raise NotFoundError("Message not found")
        if actor_id is not None and message.to_user_id != actor_id:
            raise ForbiddenError("Only the recipient can mark a message as read")
        if message.is_read:
            return message
        updated = self.storage.mark_message_read(message_id)
        if updated is None:
            raise NotFoundError("Message not found")
        return updated

    def mark_notification_read(self, notification_id: int, actor_id: int | None = None) -> NotificationRecord:
        notification = self.storage.get_notification(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if actor_id is not None and notification.user_id != actor_id:
            raise ForbiddenError("You can only update your own notifications")
        if notification.is_read:
            return notification
        updated = self.storage.mark_notification_read(notification_id)
        if updated is None:
            raise NotFoundError("Notification not found")
        return updated

    def get_conversation(self, user_a: int, user_b: int) -> list[MessageRecord]:
        return self.storage.list_conversation(user_a, user_b)

    def list_user_messages(self, user_id: int) -> list[MessageRecord]:
        return self.storage.list_messages_by_user(user_id)

    def list_notifications(self, user_id: int) -> list[NotificationRecord]:
        return self.storage.list_notifications_by_user(user_id)
