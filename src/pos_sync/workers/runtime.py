"""Wires the sync engine's components from settings."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncEngine

from pos_sync.application.policies.retry import RetryPolicy
from pos_sync.application.ports.clock import Clock, SystemClock
from pos_sync.application.ports.notifier import Notifier
from pos_sync.application.uow import UnitOfWorkFactory
from pos_sync.config import Settings
from pos_sync.domain.value_objects.scope import SyncScope
from pos_sync.infrastructure.db.session import build_engine, build_sessionmaker, init_models
from pos_sync.infrastructure.db.uow import sqlalchemy_uow_factory
from pos_sync.infrastructure.gateway.http_gateway import HttpRemoteGateway, build_client
from pos_sync.infrastructure.gateway.tokens import BearerToken
from pos_sync.infrastructure.net.probe import HttpConnectivityProbe
from pos_sync.infrastructure.notify.logging_notifier import LoggingNotifier
from pos_sync.infrastructure.notify.redis_pubsub import RedisPubSubNotifier
from pos_sync.workers.connectivity import ConnectivityMonitor
from pos_sync.workers.orchestrator import SyncOrchestrator
from pos_sync.workers.pull_worker import CatalogPullWorker
from pos_sync.workers.push_worker import OutboxPushWorker

logger = logging.getLogger(__name__)


@dataclass
class SyncRuntime:
    settings: Settings
    clock: Clock
    scope: SyncScope
    engine: AsyncEngine
    uow_factory: UnitOfWorkFactory
    token: BearerToken
    gateway: HttpRemoteGateway
    notifier: Notifier
    push_worker: OutboxPushWorker
    pull_worker: CatalogPullWorker
    orchestrator: SyncOrchestrator
    monitor: ConnectivityMonitor
    probe: HttpConnectivityProbe | None

    async def start(self) -> None:
        await init_models(self.engine)
        await self.monitor.start()
        if self.probe is not None:
            await self.probe.start()
        logger.info("Sync runtime started for scope %s", self.scope.key)

    async def stop(self) -> None:
        if self.probe is not None:
            await self.probe.stop()
        await self.monitor.stop()
        await self.gateway.aclose()
        if isinstance(self.notifier, RedisPubSubNotifier):
            await self.notifier.aclose()
        await self.engine.dispose()
        logger.info("Sync runtime stopped")


def build_runtime(
    s: Settings,
    *,
    clock: Clock | None = None,
    with_probe: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SyncRuntime:
    clock = clock or SystemClock()
    scope = SyncScope(tenant_id=s.TENANT_ID, store_id=s.STORE_ID)

    engine = build_engine(s.DATABASE_URL, echo=s.DB_ECHO)
    uow_factory = sqlalchemy_uow_factory(build_sessionmaker(engine))

    token = BearerToken(s.API_TOKEN, clock)
    client = build_client(s.API_BASE_URL, s.SYNC_REQUEST_TIMEOUT, transport)
    gateway = HttpRemoteGateway(client, token, scope)

    notifier: Notifier
    if s.REDIS_URL:
        notifier = RedisPubSubNotifier(
            aioredis.from_url(s.REDIS_URL, decode_responses=True),
            s.NOTIFY_CHANNEL,
            clock,
        )
    else:
        notifier = LoggingNotifier()

    push_worker = OutboxPushWorker(
        uow_factory,
        gateway,
        policy=RetryPolicy.from_settings(s),
        clock=clock,
        request_timeout=s.SYNC_REQUEST_TIMEOUT,
    )
    pull_worker = CatalogPullWorker(
        uow_factory,
        gateway,
        scope=scope,
        clock=clock,
        request_timeout=s.SYNC_REQUEST_TIMEOUT,
    )

    monitor: ConnectivityMonitor
    orchestrator = SyncOrchestrator(
        push_worker,
        pull_worker,
        notifier=notifier,
        clock=clock,
        batch_size=s.SYNC_BATCH_SIZE,
        is_online=lambda: monitor.is_online,
    )
    monitor = ConnectivityMonitor(
        orchestrator.sync_data,
        clock=clock,
        interval=s.periodic_sync_interval,
        notifier=notifier,
    )

    probe = None
    if with_probe:
        probe = HttpConnectivityProbe(
            client,
            monitor.report,
            path=s.PROBE_PATH,
            interval=s.PROBE_INTERVAL,
            clock=clock,
        )

    return SyncRuntime(
        settings=s,
        clock=clock,
        scope=scope,
        engine=engine,
        uow_factory=uow_factory,
        token=token,
        gateway=gateway,
        notifier=notifier,
        push_worker=push_worker,
        pull_worker=pull_worker,
        orchestrator=orchestrator,
        monitor=monitor,
        probe=probe,
    )
