"""Redis Pub/Sub notifier: the register UI subscribes to the channel for toasts."""
from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from pos_sync.application.ports.clock import Clock, SystemClock
from pos_sync.infrastructure.notify.serializer import serialize_notification

logger = logging.getLogger(__name__)


class RedisPubSubNotifier:
    """Implements application.ports.notifier.Notifier."""

    def __init__(self, redis: aioredis.Redis, channel: str, clock: Clock | None = None) -> None:
        self._redis = redis
        self._channel = channel
        self._clock = clock or SystemClock()

    async def notify(self, event_type: str, data: dict[str, Any]) -> None:
        raw = serialize_notification(event_type, data, self._clock.now())
        try:
            await self._redis.publish(self._channel, raw)
        except RedisError:
            # best-effort; never fails the caller
            logger.warning("Could not publish %s to %s", event_type, self._channel, exc_info=True)

    async def aclose(self) -> None:
        await self._redis.aclose()
