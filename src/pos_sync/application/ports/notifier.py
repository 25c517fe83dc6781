from __future__ import annotations

from typing import Any, Protocol

EVENT_ONLINE = "connectivity.online"
EVENT_OFFLINE = "connectivity.offline"
EVENT_SYNCED = "sync.completed"
EVENT_AUTH_REQUIRED = "sync.auth_required"


class Notifier(Protocol):
    """User-facing notifications (toasts)."""

    async def notify(self, event_type: str, data: dict[str, Any]) -> None: ...
