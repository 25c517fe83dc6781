from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ProductResponse(BaseModel):
    id: str
    name: str
    price: Decimal
    barcode: str | None
    cost_price: Decimal | None
    stock_quantity: Decimal | None
    category: str | None
    image_url: str | None
    last_fetched_at: datetime | None

    model_config = {"from_attributes": True}


class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: str | None
    email: str | None
    address: str | None
    total_credit: Decimal | None
    credit_limit: Decimal | None
    loyalty_points: int | None
    is_active: bool
    last_fetched_at: datetime | None

    model_config = {"from_attributes": True}
