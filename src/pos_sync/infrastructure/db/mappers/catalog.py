from __future__ import annotations

from datetime import datetime

from pos_sync.domain.entities.catalog import Customer, Product
from pos_sync.infrastructure.db.models.catalog import CachedCustomerModel, CachedProductModel


def product_to_entity(model: CachedProductModel) -> Product:
    return Product(
        id=model.id,
        name=model.name,
        price=model.price,
        barcode=model.barcode,
        cost_price=model.cost_price,
        stock_quantity=model.stock_quantity,
        category=model.category,
        image_url=model.image_url,
        last_fetched_at=model.last_fetched_at,
    )


def product_to_model(entity: Product, scope_key: str, fetched_at: datetime) -> CachedProductModel:
    return CachedProductModel(
        scope=scope_key,
        id=entity.id,
        name=entity.name,
        barcode=entity.barcode,
        price=entity.price,
        cost_price=entity.cost_price,
        stock_quantity=entity.stock_quantity,
        category=entity.category,
        image_url=entity.image_url,
        last_fetched_at=fetched_at,
    )


def customer_to_entity(model: CachedCustomerModel) -> Customer:
    return Customer(
        id=model.id,
        name=model.name,
        phone=model.phone,
        email=model.email,
        address=model.address,
        total_credit=model.total_credit,
        credit_limit=model.credit_limit,
        loyalty_points=model.loyalty_points,
        is_active=model.is_active,
        last_fetched_at=model.last_fetched_at,
    )


def customer_to_model(entity: Customer, scope_key: str, fetched_at: datetime) -> CachedCustomerModel:
    return CachedCustomerModel(
        scope=scope_key,
        id=entity.id,
        name=entity.name,
        phone=entity.phone,
        email=entity.email,
        address=entity.address,
        total_credit=entity.total_credit,
        credit_limit=entity.credit_limit,
        loyalty_points=entity.loyalty_points,
        is_active=entity.is_active,
        last_fetched_at=fetched_at,
    )
