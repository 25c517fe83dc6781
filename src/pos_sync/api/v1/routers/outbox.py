from __future__ import annotations

from fastapi import APIRouter, Query

from pos_sync.api.deps import RuntimeDep, UoWDep
from pos_sync.api.v1.schemas.outbox import (
    OrderResponse,
    OutboxEntryResponse,
    SaleRequest,
    SubmitSaleResponse,
)
from pos_sync.application.exceptions import NotFoundError
from pos_sync.domain.value_objects.enums import OutboxStatus
from pos_sync.services import outbox_service

router = APIRouter(prefix="/api/v1", tags=["outbox"])


@router.post("/orders", response_model=SubmitSaleResponse, status_code=201)
async def submit_sale(body: SaleRequest, runtime: RuntimeDep, uow: UoWDep) -> SubmitSaleResponse:
    result = await outbox_service.submit_sale(
        body.to_payload(),
        uow,
        runtime.gateway,
        runtime.clock,
        online=runtime.monitor.is_online,
        timeout=runtime.settings.SYNC_REQUEST_TIMEOUT,
    )
    return SubmitSaleResponse(
        queued=result.queued,
        order=OrderResponse.model_validate(result.order, from_attributes=True) if result.order else None,
        entry=OutboxEntryResponse.model_validate(result.entry, from_attributes=True) if result.entry else None,
    )


@router.post("/outbox/sales", response_model=OutboxEntryResponse, status_code=201)
async def enqueue_sale(body: SaleRequest, runtime: RuntimeDep, uow: UoWDep) -> OutboxEntryResponse:
    entry = await outbox_service.enqueue_sale(body.to_payload(), uow, runtime.clock)
    return OutboxEntryResponse.model_validate(entry, from_attributes=True)


@router.get("/outbox", response_model=list[OutboxEntryResponse])
async def list_outbox(
    uow: UoWDep,
    status: OutboxStatus | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
) -> list[OutboxEntryResponse]:
    entries = await outbox_service.list_entries(uow, status=status, limit=limit)
    return [OutboxEntryResponse.model_validate(e, from_attributes=True) for e in entries]


@router.get("/outbox/{entry_id}", response_model=OutboxEntryResponse)
async def get_outbox_entry(entry_id: int, uow: UoWDep) -> OutboxEntryResponse:
    entry = await outbox_service.get_entry(entry_id, uow)
    return OutboxEntryResponse.model_validate(entry, from_attributes=True)


@router.post("/outbox/{entry_id}/requeue", status_code=204)
async def requeue_outbox_entry(entry_id: int, runtime: RuntimeDep) -> None:
    if not await runtime.push_worker.requeue(entry_id):
        raise NotFoundError(f"outbox entry {entry_id} is not failed or rejected")


@router.delete("/outbox/{entry_id}", status_code=204)
async def delete_outbox_entry(entry_id: int, uow: UoWDep) -> None:
    await outbox_service.delete_entry(entry_id, uow)
