"""Single-flight sync pass: push queued sales, then refresh the catalog."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from pos_sync.application.dto.sync import PushResult, SyncReport
from pos_sync.application.exceptions import describe_error
from pos_sync.application.ports.clock import Clock
from pos_sync.application.ports.notifier import EVENT_AUTH_REQUIRED, EVENT_SYNCED, Notifier
from pos_sync.workers.pull_worker import CatalogPullWorker
from pos_sync.workers.push_worker import OutboxPushWorker

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    def __init__(
        self,
        push_worker: OutboxPushWorker,
        pull_worker: CatalogPullWorker,
        *,
        notifier: Notifier,
        clock: Clock,
        batch_size: int,
        is_online: Callable[[], bool] | None = None,
    ) -> None:
        self._push = push_worker
        self._pull = pull_worker
        self._notifier = notifier
        self._clock = clock
        self._batch_size = batch_size
        self._is_online = is_online
        self._lock = asyncio.Lock()
        self.last_report: SyncReport | None = None

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    async def sync_data(self) -> SyncReport | None:
        """Run one pass unless one is already running.

        Overlapping calls return ``None`` immediately. Worker failures are
        logged and recorded on the report, never raised.
        """
        if self._lock.locked():
            logger.debug("Sync pass already running; trigger ignored")
            return None
        if self._is_online is not None and not self._is_online():
            logger.debug("Offline; sync pass skipped")
            return None

        async with self._lock:
            report = SyncReport(started_at=self._clock.now())
            try:
                report.push = await self._push.flush(self._batch_size)
                await self._announce(report.push)
                report.pull = await self._pull.pull()
            except Exception as exc:
                logger.exception("Sync pass aborted")
                report.error = describe_error(exc)
            report.finished_at = self._clock.now()
            self.last_report = report
            return report

    async def _announce(self, push: PushResult) -> None:
        if push.synced:
            await self._safe_notify(EVENT_SYNCED, {"synced": push.synced})
        if push.halted_on_auth:
            await self._safe_notify(EVENT_AUTH_REQUIRED, {})

    async def _safe_notify(self, event_type: str, data: dict[str, Any]) -> None:
        try:
            await self._notifier.notify(event_type, data)
        except Exception:
            logger.exception("Notifier failed for %s", event_type)
