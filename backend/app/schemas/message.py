from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


NOTIFICATION_MESSAGE = "message"
NOTIFICATION_SYSTEM = "system"


class MessageRecord(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    content: str
    is_read: bool = False
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True


class MessageCreate(BaseModel):
    to_user_id: int
    content: str


class MessageSentOut(MessageRecord):
    delivered: bool = False


class NotificationRecord(BaseModel):
    id: int
    user_id: int
    title: str
    content: str
    type: str
    related_id: int | None = None
    is_read: bool = False
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True
