from __future__ import annotations

from enum import StrEnum


class OutboxStatus(StrEnum):
    PENDING = "pending"
    SYNCING = "syncing"
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"


class CatalogEntity(StrEnum):
    PRODUCTS = "products"
    CATEGORIES = "categories"
    CUSTOMERS = "customers"

    @property
    def watermark_key(self) -> str:
        return _WATERMARK_KEYS[self]


_WATERMARK_KEYS: dict[CatalogEntity, str] = {
    CatalogEntity.PRODUCTS: "last_product_sync",
    CatalogEntity.CATEGORIES: "last_category_sync",
    CatalogEntity.CUSTOMERS: "last_customer_sync",
}


class ConnectivityEvent(StrEnum):
    BECAME_ONLINE = "became_online"
    BECAME_OFFLINE = "became_offline"
