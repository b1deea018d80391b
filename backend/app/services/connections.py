"""Registry of live delivery channels keyed by user id.

One application-owned instance is created at startup and handed to the
transport layer through ``app.state``. A user may hold several channels at
once (one per open client). Registration, removal and delivery all run under
a single lock, so a channel is never written to after ``unregister`` returns
and concurrent lifecycles never lose each other's updates.

Channels only need a non-blocking ``offer(payload) -> bool`` and a ``closed``
flag; the WebSocket channel queues frames for its own writer task, which lets
``notify`` run from worker threads as well as from the event loop.
"""

from __future__ import annotations

import threading
from typing import Any, Protocol

from app.logging_config import get_logger


logger = get_logger(__name__)


class Channel(Protocol):
    closed: bool

    def offer(self, payload: dict[str, Any]) -> bool: ...


class ConnectionRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: dict[int, set[Channel]] = {}
        self._owners: dict[Channel, int] = {}

    def register(self, user_id: int, channel: Channel) -> None:
        with self._lock:
            previous = self._owners.get(channel)
            if previous is not None and previous != user_id:
                self._discard(previous, channel)
            self._owners[channel] = user_id
            self._channels.setdefault(user_id, set()).add(channel)
            count = len(self._channels[user_id])
        logger.info("channel_registered", user_id=user_id, channels=count)

    def unregister(self, channel: Channel) -> int | None:
        """Drop the channel; returns the user it was bound to, if any."""
        with self._lock:
            user_id = self._owners.pop(channel, None)
            if user_id is not None:
                self._discard(user_id, channel)
        if user_id is not None:
            logger.info("channel_unregistered", user_id=user_id)
        return user_id

    def notify(self, user_id: int, payload: dict[str, Any]) -> bool:
        """Offer payload to every open channel of the user.

        Never blocks and never retries. Returns True when at least one
        channel accepted the payload; zero channels is a silent drop.
        """
        delivered = 0
        with self._lock:
            for channel in list(self._channels.get(user_id, ())):
                if channel.closed:
                    self._owners.pop(channel, None)
                    self._discard(user_id, channel)
                    continue
                try:
                    accepted = channel.offer(payload)
                except Exception:
                    logger.warning("channel_offer_failed", user_id=user_id, exc_info=True)
                    accepted = False
                if accepted:
                    delivered += 1
        logger.debug("notify", user_id=user_id, payload_type=payload.get("type"), delivered=delivered)
        return delivered > 0

    def channel_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._channels.get(user_id, ()))

    def connected_users(self) -> list[int]:
        with self._lock:
            return sorted(self._channels)

    def _discard(self, user_id: int, channel: Channel) -> None:
        bucket = self._channels.get(user_id)
        if bucket is None:
            return
        bucket.discard(channel)
        if not bucket:
            del self._channels[user_id]
