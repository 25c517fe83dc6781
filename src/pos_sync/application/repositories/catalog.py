from __future__ import annotations

from datetime import datetime
from typing import Protocol

from pos_sync.domain.entities.catalog import Customer, Product


class CatalogReader(Protocol):
    async def list_products(self, scope_key: str) -> list[Product]: ...

    async def get_product_by_barcode(self, scope_key: str, barcode: str) -> Product | None: ...

    async def list_categories(self, scope_key: str) -> list[str]: ...

    async def list_customers(self, scope_key: str, *, search: str | None = None) -> list[Customer]: ...


class CatalogWriter(Protocol):
    """Full-replace writes. Callers own the transaction boundary."""

    async def replace_products(self, scope_key: str, products: list[Product], fetched_at: datetime) -> None: ...

    async def replace_categories(self, scope_key: str, names: list[str], fetched_at: datetime) -> None: ...

    async def replace_customers(self, scope_key: str, customers: list[Customer], fetched_at: datetime) -> None: ...


class SyncStateRepository(Protocol):
    async def get_watermark(self, scope_key: str, key: str) -> datetime | None: ...

    async def set_watermark(self, scope_key: str, key: str, value: datetime) -> None: ...

    async def list_watermarks(self, scope_key: str) -> dict[str, datetime]: ...
