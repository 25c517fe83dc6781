from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pos_sync.api.v1.routers import catalog, health, outbox, sync
from pos_sync.application.exceptions import (
    AuthError,
    ConflictError,
    NetworkError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from pos_sync.config import settings
from pos_sync.workers.runtime import SyncRuntime, build_runtime

logger = logging.getLogger(__name__)

RuntimeFactory = Callable[[], SyncRuntime]


def _default_runtime() -> SyncRuntime:
    return build_runtime(settings)


def create_app(runtime_factory: RuntimeFactory | None = None) -> FastAPI:
    factory = runtime_factory or _default_runtime

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup / shutdown lifecycle."""
        runtime = factory()
        await runtime.start()
        app.state.runtime = runtime
        logger.info("Local sync API ready")

        yield

        await runtime.stop()

    app = FastAPI(
        title="POS Sync Engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(sync.router)
    app.include_router(outbox.router)
    app.include_router(catalog.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(AuthError)
    async def _auth(_req: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(NetworkError)
    async def _network(_req: Request, exc: NetworkError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})

    @app.exception_handler(StorageError)
    async def _storage(_req: Request, exc: StorageError) -> JSONResponse:
        logger.error("Local store failure: %s", exc.detail)
        return JSONResponse(status_code=500, content={"detail": "local store unavailable"})
