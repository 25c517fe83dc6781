from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ConnectivityRequest(BaseModel):
    online: bool


class TokenRequest(BaseModel):
    token: str


class PushSummary(BaseModel):
    attempted: int
    synced: int
    failed: int
    recovered: int
    halted_on_auth: bool

    model_config = {"from_attributes": True}


class PullSummary(BaseModel):
    refreshed: dict[str, int]
    errors: dict[str, str]


class SyncReportResponse(BaseModel):
    started_at: datetime
    finished_at: datetime | None
    push: PushSummary | None
    pull: PullSummary | None
    error: str | None


class SyncRunResponse(BaseModel):
    ran: bool
    report: SyncReportResponse | None = None


class SyncStatusResponse(BaseModel):
    online: bool
    syncing: bool
    pending: int
    counts: dict[str, int]
    watermarks: dict[str, datetime]
    last_report: SyncReportResponse | None = None
