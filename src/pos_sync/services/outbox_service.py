from __future__ import annotations

import asyncio
import logging
from typing import Any

from pos_sync.application.dto.sync import SubmissionResult
from pos_sync.application.exceptions import ConflictError, NetworkError, NotFoundError, ValidationError
from pos_sync.application.ports.clock import Clock
from pos_sync.application.ports.gateway import RemoteGateway
from pos_sync.application.uow import UnitOfWork
from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.domain.value_objects.enums import OutboxStatus
from pos_sync.domain.value_objects.ids import new_idempotency_key

logger = logging.getLogger(__name__)


def _validate(payload: dict[str, Any]) -> None:
    items = payload.get("items")
    if not isinstance(items, list) or not items:
        raise ValidationError("sale must contain at least one item")


async def enqueue_sale(
    payload: dict[str, Any],
    uow: UnitOfWork,
    clock: Clock,
    *,
    idempotency_key: str | None = None,
) -> OutboxEntry:
    """Durably queue a sale. The key is minted here unless one is passed in."""
    _validate(payload)
    key = idempotency_key or new_idempotency_key()
    entry = await uow.outbox.add(key, {**payload, "idempotencyKey": key}, clock.now())
    await uow.commit()
    logger.info("Queued sale %d (key=%s)", entry.id, key)
    return entry


async def submit_sale(
    payload: dict[str, Any],
    uow: UnitOfWork,
    gateway: RemoteGateway,
    clock: Clock,
    *,
    online: bool,
    timeout: float,
) -> SubmissionResult:
    """Send a sale straight to the server, or queue it.

    A network failure queues the sale under the key already sent, so if the
    server did commit it the later push is deduplicated. Auth and validation
    errors are the caller's to handle.
    """
    _validate(payload)
    key = new_idempotency_key()
    if online:
        try:
            async with asyncio.timeout(timeout):
                order = await gateway.create_order({**payload, "idempotencyKey": key}, key)
            return SubmissionResult(order=order, entry=None)
        except TimeoutError:
            logger.warning("Order submission timed out; saving locally (key=%s)", key)
        except NetworkError as exc:
            logger.warning("Network error submitting order; saving locally (key=%s): %s", key, exc.detail)

    entry = await enqueue_sale(payload, uow, clock, idempotency_key=key)
    return SubmissionResult(order=None, entry=entry)


async def pending_count(uow: UnitOfWork) -> int:
    counts = await uow.outbox.count_by_status()
    return counts.get(OutboxStatus.PENDING.value, 0) + counts.get(OutboxStatus.FAILED.value, 0)


async def status_counts(uow: UnitOfWork) -> dict[str, int]:
    counts = await uow.outbox.count_by_status()
    return {status.value: counts.get(status.value, 0) for status in OutboxStatus if status != OutboxStatus.COMPLETED}


async def list_entries(uow: UnitOfWork, *, status: OutboxStatus | None = None, limit: int = 100) -> list[OutboxEntry]:
    return await uow.outbox.list_entries(status.value if status else None, limit)


async def get_entry(entry_id: int, uow: UnitOfWork) -> OutboxEntry:
    entry = await uow.outbox.get(entry_id)
    if entry is None:
        raise NotFoundError(f"outbox entry {entry_id} not found")
    return entry


async def delete_entry(entry_id: int, uow: UnitOfWork) -> None:
    """Operator discard of a queued sale. The only deletion besides a confirmed push.

    An entry in ``syncing`` belongs to the push worker and cannot be discarded.
    """
    await get_entry(entry_id, uow)
    if not await uow.outbox.delete(entry_id, skip_status=OutboxStatus.SYNCING.value):
        raise ConflictError(f"outbox entry {entry_id} is being synced")
    await uow.commit()
    logger.warning("Outbox entry %d deleted by operator", entry_id)
