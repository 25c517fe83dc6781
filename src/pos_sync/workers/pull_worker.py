"""Catalog pull worker: full-replace refresh of the local read cache."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

from pos_sync.application.dto.sync import PullResult
from pos_sync.application.exceptions import describe_error
from pos_sync.application.ports.clock import Clock
from pos_sync.application.ports.gateway import RemoteGateway
from pos_sync.application.uow import UnitOfWork, UnitOfWorkFactory
from pos_sync.domain.value_objects.enums import CatalogEntity
from pos_sync.domain.value_objects.scope import SyncScope

logger = logging.getLogger(__name__)


class CatalogPullWorker:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        gateway: RemoteGateway,
        *,
        scope: SyncScope,
        clock: Clock,
        request_timeout: float,
    ) -> None:
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._scope = scope
        self._clock = clock
        self._timeout = request_timeout

    @property
    def scope(self) -> SyncScope:
        return self._scope

    async def pull(self) -> PullResult:
        """Fetch every entity type, then replace each successfully fetched one.

        Each type commits independently: a failed fetch leaves that type's
        cache and watermark untouched. ``StorageError`` propagates.
        """
        fetchers: dict[CatalogEntity, Callable[[SyncScope], Awaitable[list[Any]]]] = {
            CatalogEntity.PRODUCTS: self._gateway.list_products,
            CatalogEntity.CATEGORIES: self._gateway.list_categories,
            CatalogEntity.CUSTOMERS: self._gateway.list_customers,
        }
        outcomes = await asyncio.gather(
            *(self._fetch(fetch) for fetch in fetchers.values()),
            return_exceptions=True,
        )

        result = PullResult()
        for entity, outcome in zip(fetchers, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                result.errors[entity] = describe_error(outcome)
                logger.warning("Pull of %s failed: %s", entity.value, result.errors[entity])
                continue
            await self._replace(entity, outcome)
            result.refreshed[entity] = len(outcome)
            logger.info("Synced %d %s for scope %s", len(outcome), entity.value, self._scope.key)
        return result

    async def _fetch(self, fetch: Callable[[SyncScope], Awaitable[list[Any]]]) -> list[Any]:
        async with asyncio.timeout(self._timeout):
            return await fetch(self._scope)

    async def _replace(self, entity: CatalogEntity, rows: list[Any]) -> None:
        now = self._clock.now()
        async with self._uow_factory() as uow:
            await self._write(uow, entity, rows, now)
            await uow.sync_state.set_watermark(self._scope.key, entity.watermark_key, now)
            await uow.commit()

    async def _write(self, uow: UnitOfWork, entity: CatalogEntity, rows: list[Any], now: datetime) -> None:
        key = self._scope.key
        if entity is CatalogEntity.PRODUCTS:
            await uow.catalog_w.replace_products(key, rows, now)
        elif entity is CatalogEntity.CATEGORIES:
            await uow.catalog_w.replace_categories(key, rows, now)
        else:
            await uow.catalog_w.replace_customers(key, rows, now)
