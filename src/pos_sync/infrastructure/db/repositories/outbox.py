from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.domain.value_objects.enums import OutboxStatus
from pos_sync.infrastructure.db.mappers import outbox as mapper
from pos_sync.infrastructure.db.models.outbox import OutboxEntryModel

MAX_ERROR_LENGTH = 500


class OutboxRepo:
    """Outbox persistence. Assumes one sync process per local store."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        idempotency_key: str,
        payload: dict[str, Any],
        created_at: datetime,
    ) -> OutboxEntry:
        model = OutboxEntryModel(
            idempotency_key=idempotency_key,
            payload=dict(payload),
            status=OutboxStatus.PENDING.value,
            retry_count=0,
            next_retry_at=None,
            last_error=None,
            created_at=created_at,
            updated_at=created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def get(self, entry_id: int) -> OutboxEntry | None:
        model = await self._session.get(OutboxEntryModel, entry_id)
        return mapper.model_to_entity(model) if model else None

    async def list_entries(self, status: str | None = None, limit: int = 100) -> list[OutboxEntry]:
        stmt = (
            select(OutboxEntryModel)
            .order_by(OutboxEntryModel.created_at.asc(), OutboxEntryModel.id.asc())
            .limit(limit)
        )
        if status is not None:
            stmt = stmt.where(OutboxEntryModel.status == status)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def fetch_due(self, now: datetime, batch_size: int) -> list[OutboxEntry]:
        stmt = (
            select(OutboxEntryModel)
            .where(
                OutboxEntryModel.status.in_([OutboxStatus.PENDING.value, OutboxStatus.FAILED.value]),
                (
                    OutboxEntryModel.next_retry_at.is_(None)
                    | (OutboxEntryModel.next_retry_at <= now)
                ),
            )
            .order_by(OutboxEntryModel.created_at.asc(), OutboxEntryModel.id.asc())
            .limit(batch_size)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(OutboxEntryModel.status, func.count()).group_by(OutboxEntryModel.status)
        result = await self._session.execute(stmt)
        return {status: count for status, count in result.all()}

    async def mark_syncing(self, entry_id: int, now: datetime) -> None:
        stmt = (
            update(OutboxEntryModel)
            .where(OutboxEntryModel.id == entry_id)
            .values(status=OutboxStatus.SYNCING.value, updated_at=now)
        )
        await self._session.execute(stmt)

    async def mark_failed(
        self,
        entry_id: int,
        *,
        status: str,
        next_retry_at: datetime | None,
        error: str,
        now: datetime,
    ) -> None:
        stmt = (
            update(OutboxEntryModel)
            .where(OutboxEntryModel.id == entry_id)
            .values(
                status=status,
                retry_count=OutboxEntryModel.retry_count + 1,
                next_retry_at=next_retry_at,
                last_error=error[:MAX_ERROR_LENGTH],
                updated_at=now,
            )
        )
        await self._session.execute(stmt)

    async def reset_in_flight(self, now: datetime) -> int:
        """Return entries orphaned in ``syncing`` to ``pending``."""
        stmt = (
            update(OutboxEntryModel)
            .where(OutboxEntryModel.status == OutboxStatus.SYNCING.value)
            .values(status=OutboxStatus.PENDING.value, updated_at=now)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def requeue(self, entry_id: int, now: datetime) -> bool:
        stmt = (
            update(OutboxEntryModel)
            .where(
                OutboxEntryModel.id == entry_id,
                OutboxEntryModel.status.in_([OutboxStatus.FAILED.value, OutboxStatus.REJECTED.value]),
            )
            .values(status=OutboxStatus.PENDING.value, next_retry_at=None, updated_at=now)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def delete(self, entry_id: int, *, skip_status: str | None = None) -> bool:
        """Delete one entry. With ``skip_status``, an entry in that status is left alone."""
        stmt = delete(OutboxEntryModel).where(OutboxEntryModel.id == entry_id)
        if skip_status is not None:
            stmt = stmt.where(OutboxEntryModel.status != skip_status)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
