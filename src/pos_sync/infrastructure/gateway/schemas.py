"""Wire shapes returned by the remote POS API."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pos_sync.domain.entities.catalog import Customer, OrderRecord, Product


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class _CategoryRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class ProductIn(_Wire):
    id: str
    name: str
    barcode: str | None = None
    selling_price: Decimal | None = None
    price: Decimal | None = None
    cost_price: Decimal | None = None
    stock_quantity: Decimal | None = None
    category: str | None = None
    categories: _CategoryRef | None = None
    image_url: str | None = None
    image: str | None = None

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.selling_price or self.price or Decimal("0"),
            barcode=self.barcode or None,
            cost_price=self.cost_price,
            stock_quantity=self.stock_quantity,
            category=self.categories.name if self.categories else self.category,
            image_url=self.image_url or self.image,
        )


class CustomerIn(_Wire):
    id: str
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    total_credit: Decimal | None = None
    credit_limit: Decimal | None = None
    loyalty_points: int | None = None
    is_active: bool | None = None

    def to_entity(self) -> Customer:
        return Customer(
            id=self.id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
            total_credit=self.total_credit,
            credit_limit=self.credit_limit,
            loyalty_points=self.loyalty_points,
            is_active=True if self.is_active is None else self.is_active,
        )


class OrderIn(_Wire):
    id: str
    invoice_number: str | None = None
    total_amount: Decimal | None = None

    def to_entity(self, raw: dict[str, Any]) -> OrderRecord:
        return OrderRecord(
            id=self.id,
            invoice_number=self.invoice_number,
            total_amount=self.total_amount,
            raw=raw,
        )


def category_names(items: list[Any]) -> list[str]:
    names: list[str] = []
    for item in items:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, dict) and item.get("name"):
            names.append(str(item["name"]))
    return names
