from __future__ import annotations

from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.infrastructure.db.models.outbox import OutboxEntryModel


def model_to_entity(model: OutboxEntryModel) -> OutboxEntry:
    return OutboxEntry(
        id=model.id,
        idempotency_key=model.idempotency_key,
        payload=model.payload,
        status=model.status,
        retry_count=model.retry_count,
        next_retry_at=model.next_retry_at,
        last_error=model.last_error,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
