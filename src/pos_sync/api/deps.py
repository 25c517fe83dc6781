"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from pos_sync.application.uow import UnitOfWork
from pos_sync.workers.runtime import SyncRuntime


def get_runtime(request: Request) -> SyncRuntime:
    return request.app.state.runtime


RuntimeDep = Annotated[SyncRuntime, Depends(get_runtime)]


async def get_uow(runtime: RuntimeDep) -> AsyncIterator[UnitOfWork]:
    async with runtime.uow_factory() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]
