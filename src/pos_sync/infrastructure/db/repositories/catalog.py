from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_sync.domain.entities.catalog import Customer, Product
from pos_sync.infrastructure.db.mappers import catalog as mapper
from pos_sync.infrastructure.db.models.catalog import (
    CachedCategoryModel,
    CachedCustomerModel,
    CachedProductModel,
)


class CatalogReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_products(self, scope_key: str) -> list[Product]:
        stmt = (
            select(CachedProductModel)
            .where(CachedProductModel.scope == scope_key)
            .order_by(CachedProductModel.name.asc(), CachedProductModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.product_to_entity(m) for m in result.scalars().all()]

    async def get_product_by_barcode(self, scope_key: str, barcode: str) -> Product | None:
        stmt = (
            select(CachedProductModel)
            .where(
                CachedProductModel.scope == scope_key,
                CachedProductModel.barcode == barcode,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.product_to_entity(model) if model else None

    async def list_categories(self, scope_key: str) -> list[str]:
        stmt = (
            select(CachedCategoryModel.name)
            .where(CachedCategoryModel.scope == scope_key)
            .order_by(CachedCategoryModel.position.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_customers(self, scope_key: str, *, search: str | None = None) -> list[Customer]:
        stmt = (
            select(CachedCustomerModel)
            .where(CachedCustomerModel.scope == scope_key)
            .order_by(CachedCustomerModel.name.asc(), CachedCustomerModel.id.asc())
        )
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    CachedCustomerModel.name.ilike(pattern),
                    CachedCustomerModel.phone.like(pattern),
                )
            )
        result = await self._session.execute(stmt)
        return [mapper.customer_to_entity(m) for m in result.scalars().all()]


class CatalogWriterRepo:
    """Clear-then-insert per scope. Runs inside the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def replace_products(self, scope_key: str, products: list[Product], fetched_at: datetime) -> None:
        await self._session.execute(
            delete(CachedProductModel).where(CachedProductModel.scope == scope_key)
        )
        # last occurrence wins if the server repeats an id
        unique = {p.id: p for p in products}
        self._session.add_all(
            mapper.product_to_model(p, scope_key, fetched_at) for p in unique.values()
        )
        await self._session.flush()

    async def replace_categories(self, scope_key: str, names: list[str], fetched_at: datetime) -> None:
        await self._session.execute(
            delete(CachedCategoryModel).where(CachedCategoryModel.scope == scope_key)
        )
        self._session.add_all(
            CachedCategoryModel(scope=scope_key, name=name, position=pos, last_fetched_at=fetched_at)
            for pos, name in enumerate(dict.fromkeys(names))
        )
        await self._session.flush()

    async def replace_customers(self, scope_key: str, customers: list[Customer], fetched_at: datetime) -> None:
        await self._session.execute(
            delete(CachedCustomerModel).where(CachedCustomerModel.scope == scope_key)
        )
        unique = {c.id: c for c in customers}
        self._session.add_all(
            mapper.customer_to_model(c, scope_key, fetched_at) for c in unique.values()
        )
        await self._session.flush()
