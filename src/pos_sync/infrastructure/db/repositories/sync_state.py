from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_sync.infrastructure.db.models.sync_state import SyncStateModel


class SyncStateRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_watermark(self, scope_key: str, key: str) -> datetime | None:
        model = await self._session.get(SyncStateModel, (scope_key, key))
        return model.value if model else None

    async def set_watermark(self, scope_key: str, key: str, value: datetime) -> None:
        await self._session.merge(SyncStateModel(scope=scope_key, key=key, value=value))
        await self._session.flush()

    async def list_watermarks(self, scope_key: str) -> dict[str, datetime]:
        stmt = select(SyncStateModel).where(SyncStateModel.scope == scope_key)
        result = await self._session.execute(stmt)
        return {m.key: m.value for m in result.scalars().all()}
