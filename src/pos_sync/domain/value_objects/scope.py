from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SyncScope:
    """Tenant/store partition that cached rows and watermarks belong to."""

    tenant_id: str
    store_id: str | None = None

    @property
    def key(self) -> str:
        if self.store_id:
            return f"{self.tenant_id}/{self.store_id}"
        return self.tenant_id
