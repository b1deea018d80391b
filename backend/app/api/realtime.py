"""Real-time WebSocket transport.

Each socket gets a :class:`WebSocketChannel` that queues outgoing frames for
a dedicated writer task. ``offer`` can therefore be called from the event
loop or from the threadpool running sync routes without blocking on the
network. Inbound frames are JSON objects with a ``type`` field; replies and
errors go out through the same queue so they keep their order relative to
pushed messages.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import threading
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from app.auth import decode_access_token
from app.errors import ForbiddenError, MarketplaceError, NotFoundError, ValidationError
from app.logging_config import get_logger
from app.services.messaging import MessageRouter


router = APIRouter()
logger = get_logger(__name__)

MAX_PENDING_FRAMES = 256


class WebSocketChannel:
    """Outgoing side of one socket.

    ``offer`` reserves a slot in the writer queue before it reports success,
    including when the frame is handed over from another thread. A True
    return therefore means the frame will be written unless the socket
    closes first; a full queue refuses the frame instead.
    """

    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop, max_pending: int = MAX_PENDING_FRAMES):
        self.websocket = websocket
        self.loop = loop
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_pending)
        self.closed = False
        self._slots_lock = threading.Lock()
        self._in_flight = 0

    def offer(self, payload: dict[str, Any]) -> bool:
        if self.closed:
            return False
        if not self._reserve():
            logger.warning("channel_queue_full", payload_type=payload.get("type"))
            return False
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self.loop:
            return self._put(payload)
        try:
            self.loop.call_soon_threadsafe(self._put, payload)
        except RuntimeError:
            # Loop already shut down.
            self._release()
            self.closed = True
            return False
        return True

    def _reserve(self) -> bool:
        with self._slots_lock:
            if self.queue.qsize() + self._in_flight >= self.queue.maxsize:
                return False
            self._in_flight += 1
            return True

    def _release(self) -> None:
        with self._slots_lock:
            self._in_flight -= 1

    def _put(self, payload: dict[str, Any]) -> bool:
        # Runs on the loop; the slot was reserved by offer.
        with self._slots_lock:
            self._in_flight -= 1
            if self.closed:
                return False
            self.queue.put_nowait(payload)
        return True

    async def run_writer(self) -> None:
        try:
            while True:
                payload = await self.queue.get()
                await self.websocket.send_json(payload)
        except WebSocketDisconnect:
            pass
        except RuntimeError:
            logger.info("channel_write_failed", exc_info=True)
        finally:
            self.closed = True

    def close(self) -> None:
        self.closed = True


def _error_frame(message: str, kind: str) -> dict[str, Any]:
    return {"type": "error", "message": message, "kind": kind}


def _int_field(frame: dict[str, Any], name: str) -> int:
    value = frame.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer", fields=[name])
    return value


def _authenticate(state: Any, frame: dict[str, Any]) -> int:
    user_id = _int_field(frame, "userId")
    if state.settings.realtime_require_token:
        token = frame.get("token")
        token_user = decode_access_token(token, state.settings.auth_secret) if isinstance(token, str) else None
        if token_user != user_id:
            raise ForbiddenError("Invalid token")
    with state.open_storage() as storage:
        if storage.get_user(user_id) is None:
            raise NotFoundError("User not found")
    return user_id


def _send_message(state: Any, from_user_id: int, frame: dict[str, Any]) -> int:
    to_user_id = _int_field(frame, "toUserId")
    content = frame.get("content")
    with state.open_storage() as storage:
        router_ = MessageRouter(storage, state.registry, max_message_length=state.settings.max_message_length)
        result = router_.send_message(from_user_id, to_user_id, content)
    return result.message.id


@router.websocket("/ws")
async def realtime(websocket: WebSocket) -> None:
    await websocket.accept()
    state = websocket.app.state
    registry = state.registry
    channel = WebSocketChannel(websocket, asyncio.get_running_loop())
    writer = asyncio.create_task(channel.run_writer())
    user_id: int | None = None

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                channel.offer(_error_frame("Frames must be JSON text", "validation"))
                continue
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                channel.offer(_error_frame("Invalid JSON", "validation"))
                continue
            if not isinstance(frame, dict):
                channel.offer(_error_frame("Frame must be a JSON object", "validation"))
                continue

            frame_type = frame.get("type")
            try:
                if frame_type == "authenticate":
                    user_id = await run_in_threadpool(_authenticate, state, frame)
                    registry.register(user_id, channel)
                    channel.offer({"type": "authenticated", "userId": user_id})
                elif frame_type == "message":
                    if user_id is None:
                        raise ForbiddenError("Not authenticated")
                    message_id = await run_in_threadpool(_send_message, state, user_id, frame)
                    channel.offer({"type": "message_sent", "messageId": message_id})
                else:
                    raise ValidationError(f"Unknown frame type: {frame_type}", fields=["type"])
            except MarketplaceError as exc:
                logger.info("frame_rejected", user_id=user_id, frame_type=frame_type, kind=exc.kind)
                channel.offer(_error_frame(exc.message, exc.kind))
    except WebSocketDisconnect:
        pass
    finally:
        channel.close()
        registry.unregister(channel)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
        logger.info("socket_closed", user_id=user_id)
