"""Connectivity monitor: turns online/offline transitions and ticks into sync triggers."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine

from pos_sync.application.ports.clock import Clock
from pos_sync.application.ports.notifier import EVENT_OFFLINE, EVENT_ONLINE, Notifier
from pos_sync.domain.value_objects.enums import ConnectivityEvent

logger = logging.getLogger(__name__)

SyncTrigger = Callable[[], Awaitable[Any]]
Listener = Callable[[ConnectivityEvent], None]


class Subscription:
    def __init__(self, listeners: list[Listener], listener: Listener) -> None:
        self._listeners = listeners
        self._listener = listener

    def cancel(self) -> None:
        if self._listener in self._listeners:
            self._listeners.remove(self._listener)


class ConnectivityMonitor:
    """Holds the current online state and schedules sync passes.

    ``report`` never awaits: triggers and notifications run as background
    tasks, so callers (probe loop, HTTP handlers) are never blocked by a
    sync pass.
    """

    def __init__(
        self,
        trigger: SyncTrigger,
        *,
        clock: Clock,
        interval: float,
        notifier: Notifier | None = None,
        initially_online: bool = False,
    ) -> None:
        self._trigger = trigger
        self._clock = clock
        self._interval = interval
        self._notifier = notifier
        self._online = initially_online
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._ticker: asyncio.Task[None] | None = None

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    def report(self, online: bool) -> ConnectivityEvent | None:
        if online == self._online:
            return None
        self._online = online
        event = ConnectivityEvent.BECAME_ONLINE if online else ConnectivityEvent.BECAME_OFFLINE
        logger.info("Connectivity changed: %s", event.value)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Connectivity listener failed")

        if self._notifier is not None:
            if online:
                self._spawn(self._notifier.notify(EVENT_ONLINE, {"message": "Back online, syncing now"}))
            else:
                self._spawn(self._notifier.notify(EVENT_OFFLINE, {"message": "Offline, sales are saved locally"}))
        if online:
            self._spawn(self._trigger())
        return event

    def trigger_now(self) -> None:
        self._spawn(self._trigger())

    async def start(self) -> None:
        if self._ticker is None:
            self._ticker = asyncio.create_task(self._run_periodic(), name="sync-periodic")
            logger.info("Periodic sync started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        if self._ticker:
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                pass
            self._ticker = None
            logger.info("Periodic sync stopped")
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait for spawned triggers and notifications to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_periodic(self) -> None:
        while True:
            await self._clock.sleep(self._interval)
            if self._online:
                self._spawn(self._trigger())

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background sync task failed", exc_info=task.exception())
