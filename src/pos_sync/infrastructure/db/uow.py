from __future__ import annotations

from types import TracebackType
from typing import Callable, Self

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pos_sync.application.exceptions import StorageError
from pos_sync.infrastructure.db.repositories.catalog import CatalogReaderRepo, CatalogWriterRepo
from pos_sync.infrastructure.db.repositories.outbox import OutboxRepo
from pos_sync.infrastructure.db.repositories.sync_state import SyncStateRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession.

    SQLAlchemy errors leaving the ``async with`` block are rolled back and
    re-raised as ``StorageError``.
    """

    def __init__(self, session: AsyncSession, *, close_on_exit: bool = False) -> None:
        self._session = session
        self._close_on_exit = close_on_exit
        self.outbox = OutboxRepo(session)
        self.catalog = CatalogReaderRepo(session)
        self.catalog_w = CatalogWriterRepo(session)
        self.sync_state = SyncStateRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"commit failed: {exc}") from exc

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            # no-op after commit; discards uncommitted work otherwise
            await self.rollback()
        finally:
            if self._close_on_exit:
                await self._session.close()
        if isinstance(exc_val, SQLAlchemyError):
            raise StorageError(str(exc_val)) from exc_val


def sqlalchemy_uow_factory(sessionmaker: async_sessionmaker[AsyncSession]) -> Callable[[], SqlAlchemyUoW]:
    def _factory() -> SqlAlchemyUoW:
        return SqlAlchemyUoW(sessionmaker(), close_on_exit=True)

    return _factory
