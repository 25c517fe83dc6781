from __future__ import annotations

import logging
from datetime import datetime

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pos_sync.application.ports.notifier import EVENT_SYNCED
from pos_sync.infrastructure.notify.logging_notifier import LoggingNotifier
from pos_sync.infrastructure.notify.redis_pubsub import RedisPubSubNotifier
from pos_sync.infrastructure.notify.serializer import deserialize_notification, serialize_notification
from tests.conftest import T0, FakeClock


class FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.published: list[tuple[str, str]] = []
        self.closed = False
        self._fail = fail

    async def publish(self, channel: str, message: str) -> int:
        if self._fail:
            raise RedisConnectionError("redis down")
        self.published.append((channel, message))
        return 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_publishes_envelope_to_channel():
    redis = FakeRedis()
    notifier = RedisPubSubNotifier(redis, "pos.sync.notifications", FakeClock())

    await notifier.notify(EVENT_SYNCED, {"synced": 3})

    channel, raw = redis.published[0]
    assert channel == "pos.sync.notifications"
    assert deserialize_notification(raw) == (EVENT_SYNCED, {"synced": 3})


@pytest.mark.asyncio
async def test_redis_outage_is_swallowed(caplog):
    notifier = RedisPubSubNotifier(FakeRedis(fail=True), "ch", FakeClock())

    with caplog.at_level(logging.WARNING):
        await notifier.notify(EVENT_SYNCED, {"synced": 1})

    assert "Could not publish" in caplog.text


@pytest.mark.asyncio
async def test_aclose_closes_connection():
    redis = FakeRedis()
    await RedisPubSubNotifier(redis, "ch").aclose()
    assert redis.closed is True


@pytest.mark.asyncio
async def test_logging_notifier(caplog):
    with caplog.at_level(logging.INFO):
        await LoggingNotifier().notify(EVENT_SYNCED, {"synced": 2})

    assert EVENT_SYNCED in caplog.text


def test_serializer_handles_datetimes():
    raw = serialize_notification("x", {"at": T0}, datetime(2026, 1, 1))

    event, data = deserialize_notification(raw)
    assert event == "x"
    assert data == {"at": T0.isoformat()}
