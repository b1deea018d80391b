from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.deps import get_message_router
from app.schemas.message import MessageCreate, MessageRecord, MessageSentOut
from app.schemas.user import UserRecord
from app.services.messaging import MessageRouter


router = APIRouter()


@router.get("", response_model=list[MessageRecord])
def list_messages(
    user_id: int | None = Query(default=None),
    messaging: MessageRouter = Depends(get_message_router),
    current_user: UserRecord = Depends(get_current_user),
) -> list[MessageRecord]:
    if user_id is not None:
        return messaging.get_conversation(current_user.id, user_id)
    return messaging.list_user_messages(current_user.id)


@router.post("", response_model=MessageSentOut, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    messaging: MessageRouter = Depends(get_message_router),
    current_user: UserRecord = Depends(get_current_user),
) -> MessageSentOut:
    result = messaging.send_message(current_user.id, payload.to_user_id, payload.content)
    return MessageSentOut(**result.message.model_dump(), delivered=result.delivered)


@router.put("/{message_id}/read", response_model=MessageRecord)
def mark_message_read(
    message_id: int,
    messaging: MessageRouter = Depends(get_message_router),
    current_user: UserRecord = Depends(get_current_user),
) -> MessageRecord:
    return messaging.mark_message_read(message_id, actor_id=current_user.id)
