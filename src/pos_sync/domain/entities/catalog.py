from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    price: Decimal
    barcode: str | None = None
    cost_price: Decimal | None = None
    stock_quantity: Decimal | None = None
    category: str | None = None
    image_url: str | None = None
    last_fetched_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    total_credit: Decimal | None = None
    credit_limit: Decimal | None = None
    loyalty_points: int | None = None
    is_active: bool = True
    last_fetched_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class OrderRecord:
    """Server acknowledgement of a created order."""

    id: str
    invoice_number: str | None
    total_amount: Decimal | None
    raw: dict[str, Any]
