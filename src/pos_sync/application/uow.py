from __future__ import annotations

from typing import Callable, Protocol

from pos_sync.application.repositories.catalog import (
    CatalogReader,
    CatalogWriter,
    SyncStateRepository,
)
from pos_sync.application.repositories.outbox import OutboxRepository


class UnitOfWork(Protocol):
    outbox: OutboxRepository
    catalog: CatalogReader
    catalog_w: CatalogWriter
    sync_state: SyncStateRepository

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...

    async def __aenter__(self) -> UnitOfWork: ...
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
