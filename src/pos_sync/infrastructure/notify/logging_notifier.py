from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Fallback notifier when no UI channel is configured."""

    async def notify(self, event_type: str, data: dict[str, Any]) -> None:
        logger.info("notification %s %s", event_type, data)
