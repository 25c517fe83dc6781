from __future__ import annotations

from fastapi import APIRouter

from pos_sync.api.deps import RuntimeDep, UoWDep
from pos_sync.api.v1.schemas.sync import (
    ConnectivityRequest,
    PullSummary,
    PushSummary,
    SyncReportResponse,
    SyncRunResponse,
    SyncStatusResponse,
    TokenRequest,
)
from pos_sync.application.dto.sync import SyncReport
from pos_sync.services import catalog_service, outbox_service

router = APIRouter(prefix="/api/v1/sync", tags=["sync"])


def _report_response(report: SyncReport | None) -> SyncReportResponse | None:
    if report is None:
        return None
    pull = None
    if report.pull is not None:
        pull = PullSummary(
            refreshed={e.value: n for e, n in report.pull.refreshed.items()},
            errors={e.value: msg for e, msg in report.pull.errors.items()},
        )
    return SyncReportResponse(
        started_at=report.started_at,
        finished_at=report.finished_at,
        push=PushSummary.model_validate(report.push, from_attributes=True) if report.push else None,
        pull=pull,
        error=report.error,
    )


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(runtime: RuntimeDep, uow: UoWDep) -> SyncStatusResponse:
    return SyncStatusResponse(
        online=runtime.monitor.is_online,
        syncing=runtime.orchestrator.is_syncing,
        pending=await outbox_service.pending_count(uow),
        counts=await outbox_service.status_counts(uow),
        watermarks=await catalog_service.watermarks(runtime.scope, uow),
        last_report=_report_response(runtime.orchestrator.last_report),
    )


@router.post("/run", response_model=SyncRunResponse)
async def run_sync(runtime: RuntimeDep) -> SyncRunResponse:
    report = await runtime.orchestrator.sync_data()
    return SyncRunResponse(ran=report is not None, report=_report_response(report))


@router.post("/connectivity", status_code=204)
async def report_connectivity(body: ConnectivityRequest, runtime: RuntimeDep) -> None:
    runtime.monitor.report(body.online)


@router.put("/token", status_code=204)
async def replace_token(body: TokenRequest, runtime: RuntimeDep) -> None:
    runtime.token.update(body.token)
    if runtime.monitor.is_online:
        runtime.monitor.trigger_now()
