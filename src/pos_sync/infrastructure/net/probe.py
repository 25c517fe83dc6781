"""Reachability probe feeding the connectivity monitor."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import httpx

from pos_sync.application.ports.clock import Clock

logger = logging.getLogger(__name__)

ReportCallback = Callable[[bool], Any]


class HttpConnectivityProbe:
    """Background task that polls the gateway and reports online/offline.

    Any HTTP answer below 500 counts as reachable; transport errors,
    timeouts and 5xx count as offline.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        report: ReportCallback,
        *,
        path: str,
        interval: float,
        clock: Clock,
        timeout: float = 5.0,
    ) -> None:
        self._client = client
        self._report = report
        self._path = path
        self._interval = interval
        self._clock = clock
        self._timeout = timeout
        self._task: asyncio.Task[None] | None = None

    async def check(self) -> bool:
        try:
            resp = await self._client.get(self._path, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.debug("Probe %s failed: %s", self._path, exc.__class__.__name__)
            return False
        return resp.status_code < 500

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="connectivity-probe")
        logger.info("Connectivity probe started on %s (every %.1fs)", self._path, self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Connectivity probe stopped")

    async def _run(self) -> None:
        while True:
            try:
                self._report(await self.check())
            except Exception:
                logger.exception("Connectivity probe error")
            await self._clock.sleep(self._interval)
