from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from pos_sync.domain.entities.outbox_entry import OutboxEntry


class OutboxRepository(Protocol):
    async def add(
        self,
        idempotency_key: str,
        payload: dict[str, Any],
        created_at: datetime,
    ) -> OutboxEntry: ...

    async def get(self, entry_id: int) -> OutboxEntry | None: ...

    async def list_entries(self, status: str | None = None, limit: int = 100) -> list[OutboxEntry]: ...

    async def fetch_due(self, now: datetime, batch_size: int) -> list[OutboxEntry]: ...

    async def count_by_status(self) -> dict[str, int]: ...

    async def mark_syncing(self, entry_id: int, now: datetime) -> None: ...

    async def mark_failed(
        self,
        entry_id: int,
        *,
        status: str,
        next_retry_at: datetime | None,
        error: str,
        now: datetime,
    ) -> None: ...

    async def reset_in_flight(self, now: datetime) -> int: ...

    async def requeue(self, entry_id: int, now: datetime) -> bool: ...

    async def delete(self, entry_id: int, *, skip_status: str | None = None) -> bool: ...
