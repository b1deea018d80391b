from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth import get_current_user
from app.deps import get_message_router
from app.schemas.message import NotificationRecord
from app.schemas.user import UserRecord
from app.services.messaging import MessageRouter


router = APIRouter()


@router.get("", response_model=list[NotificationRecord])
def list_notifications(
    messaging: MessageRouter = Depends(get_message_router),
    current_user: UserRecord = Depends(get_current_user),
) -> list[NotificationRecord]:
    return messaging.list_notifications(current_user.id)


@router.put("/{notification_id}/read", response_model=NotificationRecord)
def mark_notification_read(
    notification_id: int,
    messaging: MessageRouter = Depends(get_message_router),
    current_user: UserRecord = Depends(get_current_user),
) -> NotificationRecord:
    return messaging.mark_notification_read(notification_id, actor_id=current_user.id)
