from __future__ import annotations

from datetime import datetime

from pos_sync.application.exceptions import NotFoundError
from pos_sync.application.uow import UnitOfWork
from pos_sync.domain.entities.catalog import Customer, Product
from pos_sync.domain.value_objects.scope import SyncScope


async def list_products(scope: SyncScope, uow: UnitOfWork) -> list[Product]:
    return await uow.catalog.list_products(scope.key)


async def find_product_by_barcode(scope: SyncScope, barcode: str, uow: UnitOfWork) -> Product:
    product = await uow.catalog.get_product_by_barcode(scope.key, barcode)
    if product is None:
        raise NotFoundError(f"no product with barcode {barcode}")
    return product


async def list_categories(scope: SyncScope, uow: UnitOfWork) -> list[str]:
    return await uow.catalog.list_categories(scope.key)


async def list_customers(scope: SyncScope, uow: UnitOfWork, *, search: str | None = None) -> list[Customer]:
    return await uow.catalog.list_customers(scope.key, search=search)


async def watermarks(scope: SyncScope, uow: UnitOfWork) -> dict[str, datetime]:
    return await uow.sync_state.list_watermarks(scope.key)
