from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pos_sync.domain.entities.catalog import OrderRecord
from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.domain.value_objects.enums import CatalogEntity


@dataclass(slots=True)
class PushResult:
    attempted: int = 0
    synced: int = 0
    failed: int = 0
    recovered: int = 0
    halted_on_auth: bool = False


@dataclass(slots=True)
class PullResult:
    refreshed: dict[CatalogEntity, int] = field(default_factory=dict)
    errors: dict[CatalogEntity, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(slots=True)
class SyncReport:
    started_at: datetime
    finished_at: datetime | None = None
    push: PushResult | None = None
    pull: PullResult | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Outcome of ``submit_sale``: either a server order or a queued entry."""

    order: OrderRecord | None
    entry: OutboxEntry | None

    @property
    def queued(self) -> bool:
        return self.entry is not None
