from __future__ import annotations

from typing import Any, Protocol

from pos_sync.domain.entities.catalog import Customer, OrderRecord, Product
from pos_sync.domain.value_objects.scope import SyncScope


class RemoteGateway(Protocol):
    """Authoritative server API.

    Implementations raise ``NetworkError``, ``AuthError`` or
    ``ValidationError`` from ``pos_sync.application.exceptions``.
    ``create_order`` must be deduplicated server-side by ``idempotency_key``.
    """

    async def create_order(self, payload: dict[str, Any], idempotency_key: str) -> OrderRecord: ...

    async def list_products(self, scope: SyncScope) -> list[Product]: ...

    async def list_categories(self, scope: SyncScope) -> list[str]: ...

    async def list_customers(self, scope: SyncScope) -> list[Customer]: ...
