from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaleItem(BaseModel):
    productId: str
    quantity: float = Field(gt=0)


class SaleRequest(BaseModel):
    """Sale body as the register builds it; unknown fields are passed through."""

    model_config = ConfigDict(extra="allow")

    items: list[SaleItem] = Field(min_length=1)
    paymentMethod: str = "cash"
    discountAmount: float = 0
    customerId: str | None = None
    customerName: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class OutboxEntryResponse(BaseModel):
    id: int
    idempotency_key: str
    status: str
    retry_count: int
    next_retry_at: datetime | None
    last_error: str | None
    created_at: datetime
    updated_at: datetime
    payload: dict[str, Any]

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: str
    invoice_number: str | None
    total_amount: Decimal | None

    model_config = {"from_attributes": True}


class SubmitSaleResponse(BaseModel):
    queued: bool
    order: OrderResponse | None = None
    entry: OutboxEntryResponse | None = None
