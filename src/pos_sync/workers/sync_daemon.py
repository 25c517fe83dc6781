"""Headless sync daemon: monitor + probe without the local HTTP API."""
from __future__ import annotations

import asyncio
import logging

from pos_sync.config import settings
from pos_sync.workers.runtime import build_runtime

logger = logging.getLogger(__name__)


async def run_sync_daemon() -> None:
    runtime = build_runtime(settings)
    await runtime.start()
    logger.info(
        "Sync daemon started (batch=%d, periodic=%.1fs, timeout=%.1fs)",
        settings.SYNC_BATCH_SIZE,
        settings.periodic_sync_interval,
        settings.SYNC_REQUEST_TIMEOUT,
    )

    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await runtime.stop()


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_sync_daemon())


if __name__ == "__main__":
    main()
