from __future__ import annotations

import asyncio

import pytest

from pos_sync.application.exceptions import AuthError, StorageError
from pos_sync.application.policies.retry import RetryPolicy
from pos_sync.application.ports.notifier import EVENT_AUTH_REQUIRED, EVENT_SYNCED
from pos_sync.services import outbox_service
from pos_sync.workers.orchestrator import SyncOrchestrator
from pos_sync.workers.pull_worker import CatalogPullWorker
from pos_sync.workers.push_worker import OutboxPushWorker
from tests.conftest import SCOPE, FakeUoW, make_sale


@pytest.fixture
def orchestrator(uow_factory, gateway, clock, notifier):
    push = OutboxPushWorker(uow_factory, gateway, policy=RetryPolicy(), clock=clock, request_timeout=5.0)
    pull = CatalogPullWorker(uow_factory, gateway, scope=SCOPE, clock=clock, request_timeout=5.0)
    return SyncOrchestrator(push, pull, notifier=notifier, clock=clock, batch_size=50)


@pytest.mark.asyncio
async def test_push_runs_before_pull(store, gateway, clock, orchestrator):
    await outbox_service.enqueue_sale(make_sale(1), FakeUoW(store), clock)

    report = await orchestrator.sync_data()

    assert gateway.events[0] == "push"
    assert set(gateway.events[1:]) == {"pull:products", "pull:categories", "pull:customers"}
    assert report.push.synced == 1
    assert report.pull.ok
    assert report.error is None
    assert orchestrator.last_report is report


@pytest.mark.asyncio
async def test_overlapping_calls_are_no_ops(store, gateway, clock, orchestrator):
    await outbox_service.enqueue_sale(make_sale(1), FakeUoW(store), clock)
    gateway.gate = asyncio.Event()

    first = asyncio.create_task(orchestrator.sync_data())
    while not gateway.order_calls:
        await asyncio.sleep(0)

    assert orchestrator.is_syncing is True
    assert await orchestrator.sync_data() is None
    assert await orchestrator.sync_data() is None

    gateway.gate.set()
    report = await first

    assert report is not None
    assert len(gateway.order_calls) == 1
    assert gateway.fetch_calls.count("products") == 1
    assert orchestrator.is_syncing is False


@pytest.mark.asyncio
async def test_storage_failure_is_reported_not_raised(uow_factory, gateway, clock, notifier):
    class BrokenPush:
        async def flush(self, batch_size):
            raise StorageError("disk I/O error")

    pull = CatalogPullWorker(uow_factory, gateway, scope=SCOPE, clock=clock, request_timeout=5.0)
    orchestrator = SyncOrchestrator(BrokenPush(), pull, notifier=notifier, clock=clock, batch_size=50)

    report = await orchestrator.sync_data()

    assert report.error == "StorageError: disk I/O error"
    assert report.pull is None
    assert orchestrator.is_syncing is False
    assert await orchestrator.sync_data() is not None


@pytest.mark.asyncio
async def test_synced_notification(store, clock, notifier, orchestrator):
    for n in (1, 2):
        await outbox_service.enqueue_sale(make_sale(n), FakeUoW(store), clock)

    await orchestrator.sync_data()

    assert notifier.events == [(EVENT_SYNCED, {"synced": 2})]


@pytest.mark.asyncio
async def test_auth_required_notification(store, gateway, clock, notifier, orchestrator):
    await outbox_service.enqueue_sale(make_sale(1), FakeUoW(store), clock)
    gateway.order_errors["p-1"] = AuthError("Unauthorized")

    report = await orchestrator.sync_data()

    assert notifier.types() == [EVENT_AUTH_REQUIRED]
    assert report.push.halted_on_auth is True
    assert report.pull is not None


@pytest.mark.asyncio
async def test_nothing_to_push_stays_quiet(notifier, orchestrator):
    await orchestrator.sync_data()

    assert notifier.events == []


@pytest.mark.asyncio
async def test_notifier_failure_does_not_abort_pass(store, gateway, clock, orchestrator, notifier):
    async def broken(event_type, data):
        raise RuntimeError("ui gone")

    notifier.notify = broken
    await outbox_service.enqueue_sale(make_sale(1), FakeUoW(store), clock)

    report = await orchestrator.sync_data()

    assert report.error is None
    assert report.pull is not None


@pytest.mark.asyncio
async def test_offline_pass_is_skipped(uow_factory, gateway, clock, notifier):
    push = OutboxPushWorker(uow_factory, gateway, policy=RetryPolicy(), clock=clock, request_timeout=5.0)
    pull = CatalogPullWorker(uow_factory, gateway, scope=SCOPE, clock=clock, request_timeout=5.0)
    orchestrator = SyncOrchestrator(
        push, pull, notifier=notifier, clock=clock, batch_size=50, is_online=lambda: False,
    )

    assert await orchestrator.sync_data() is None
    assert gateway.events == []
