"""Outbox push worker: drains queued sales to the remote order endpoint."""
from __future__ import annotations

import asyncio
import logging

from pos_sync.application.dto.sync import PushResult
from pos_sync.application.exceptions import AuthError, SyncError, ValidationError, describe_error
from pos_sync.application.policies.retry import RetryPolicy
from pos_sync.application.ports.clock import Clock
from pos_sync.application.ports.gateway import RemoteGateway
from pos_sync.application.uow import UnitOfWorkFactory
from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.domain.value_objects.enums import OutboxStatus

logger = logging.getLogger(__name__)


class OutboxPushWorker:
    """Sole writer of outbox entry status.

    Entries are submitted one at a time, oldest first. Every status write is
    committed on its own, so ``syncing`` is durable before the network call.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        gateway: RemoteGateway,
        *,
        policy: RetryPolicy,
        clock: Clock,
        request_timeout: float,
    ) -> None:
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._policy = policy
        self._clock = clock
        self._timeout = request_timeout

    async def flush(self, batch_size: int) -> PushResult:
        result = PushResult()
        now = self._clock.now()
        async with self._uow_factory() as uow:
            result.recovered = await uow.outbox.reset_in_flight(now)
            batch = await uow.outbox.fetch_due(now, batch_size)
            await uow.commit()

        if result.recovered:
            logger.warning("Recovered %d outbox entries left in syncing", result.recovered)
        if not batch:
            return result

        for entry in batch:
            result.attempted += 1
            await self._mark_syncing(entry)
            try:
                async with asyncio.timeout(self._timeout):
                    await self._gateway.create_order(entry.payload, entry.idempotency_key)
            except AuthError as exc:
                result.failed += 1
                result.halted_on_auth = True
                await self._record_auth_failure(entry, exc)
                logger.warning(
                    "Outbox entry %d rejected by auth; halting batch for %dms",
                    entry.id,
                    self._policy.auth_cooldown_ms,
                )
                break
            except TimeoutError:
                result.failed += 1
                await self._record_failure(entry, f"request timed out after {self._timeout:g}s", permanent=False)
            except SyncError as exc:
                result.failed += 1
                await self._record_failure(entry, describe_error(exc), permanent=isinstance(exc, ValidationError))
            except Exception as exc:
                logger.exception("Unexpected error pushing outbox entry %d", entry.id)
                result.failed += 1
                await self._record_failure(entry, describe_error(exc), permanent=False)
            else:
                await self._complete(entry)
                result.synced += 1

        logger.info(
            "Outbox flush: attempted=%d synced=%d failed=%d",
            result.attempted,
            result.synced,
            result.failed,
        )
        return result

    async def requeue(self, entry_id: int) -> bool:
        """Make a failed or rejected entry eligible immediately."""
        async with self._uow_factory() as uow:
            changed = await uow.outbox.requeue(entry_id, self._clock.now())
            await uow.commit()
        if changed:
            logger.info("Outbox entry %d requeued", entry_id)
        return changed

    async def _mark_syncing(self, entry: OutboxEntry) -> None:
        async with self._uow_factory() as uow:
            await uow.outbox.mark_syncing(entry.id, self._clock.now())
            await uow.commit()

    async def _complete(self, entry: OutboxEntry) -> None:
        async with self._uow_factory() as uow:
            await uow.outbox.delete(entry.id)
            await uow.commit()

    async def _record_auth_failure(self, entry: OutboxEntry, exc: AuthError) -> None:
        now = self._clock.now()
        async with self._uow_factory() as uow:
            await uow.outbox.mark_failed(
                entry.id,
                status=OutboxStatus.FAILED.value,
                next_retry_at=self._policy.auth_retry_at(now),
                error=describe_error(exc),
                now=now,
            )
            await uow.commit()

    async def _record_failure(self, entry: OutboxEntry, error: str, *, permanent: bool) -> None:
        now = self._clock.now()
        retry_count = entry.retry_count + 1
        if permanent and self._policy.exhausted(retry_count):
            status, next_retry_at = OutboxStatus.REJECTED.value, None
            logger.error("Outbox entry %d rejected after %d attempts: %s", entry.id, retry_count, error)
        else:
            status, next_retry_at = OutboxStatus.FAILED.value, self._policy.next_retry_at(now, retry_count)
            logger.warning("Outbox entry %d failed (attempt %d): %s", entry.id, retry_count, error)

        async with self._uow_factory() as uow:
            await uow.outbox.mark_failed(
                entry.id,
                status=status,
                next_retry_at=next_retry_at,
                error=error,
                now=now,
            )
            await uow.commit()
