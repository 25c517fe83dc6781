"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest

from pos_sync.application.policies.retry import RetryPolicy
from pos_sync.domain.entities.catalog import Customer, OrderRecord, Product
from pos_sync.domain.entities.outbox_entry import OutboxEntry
from pos_sync.domain.value_objects.enums import OutboxStatus
from pos_sync.domain.value_objects.scope import SyncScope

T0 = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)
SCOPE = SyncScope(tenant_id="tenant-1", store_id="store-1")


def make_sale(n: int = 1) -> dict[str, Any]:
    return {
        "items": [{"productId": f"p-{n}", "quantity": 1}],
        "paymentMethod": "cash",
        "discountAmount": 0,
    }


def make_product(pid: str, name: str | None = None, price: str = "10.00", barcode: str | None = None) -> Product:
    return Product(id=pid, name=name or f"Product {pid}", price=Decimal(price), barcode=barcode)


def make_customer(cid: str, name: str | None = None, phone: str | None = None) -> Customer:
    return Customer(id=cid, name=name or f"Customer {cid}", phone=phone)


class FakeClock:
    """Manually advanced clock. ``sleep`` resolves only when ``advance`` passes its deadline."""

    def __init__(self, start: datetime = T0) -> None:
        self._now = start
        self._sleepers: list[tuple[datetime, asyncio.Future[None]]] = []

    def now(self) -> datetime:
        return self._now

    async def sleep(self, seconds: float) -> None:
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._sleepers.append((self._now + timedelta(seconds=seconds), fut))
        await fut

    def shift(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)

    async def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)
        due = [s for s in self._sleepers if s[0] <= self._now]
        self._sleepers = [s for s in self._sleepers if s[0] > self._now]
        for _, fut in due:
            if not fut.done():
                fut.set_result(None)
        await settle()


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@dataclass
class FakeStore:
    entries: dict[int, OutboxEntry] = field(default_factory=dict)
    next_id: int = 1
    products: dict[str, list[Product]] = field(default_factory=dict)
    categories: dict[str, list[str]] = field(default_factory=dict)
    customers: dict[str, list[Customer]] = field(default_factory=dict)
    watermarks: dict[tuple[str, str], datetime] = field(default_factory=dict)
    commits: int = 0

    def syncing_count(self) -> int:
        return sum(1 for e in self.entries.values() if e.status == OutboxStatus.SYNCING)


@dataclass
class FakeOutbox:
    _store: FakeStore

    async def add(self, idempotency_key: str, payload: dict[str, Any], created_at: datetime) -> OutboxEntry:
        entry = OutboxEntry(
            id=self._store.next_id,
            idempotency_key=idempotency_key,
            payload=dict(payload),
            status=OutboxStatus.PENDING.value,
            retry_count=0,
            next_retry_at=None,
            last_error=None,
            created_at=created_at,
            updated_at=created_at,
        )
        self._store.entries[entry.id] = entry
        self._store.next_id += 1
        return entry

    async def get(self, entry_id: int) -> OutboxEntry | None:
        return self._store.entries.get(entry_id)

    async def list_entries(self, status: str | None = None, limit: int = 100) -> list[OutboxEntry]:
        rows = sorted(self._store.entries.values(), key=lambda e: (e.created_at, e.id))
        if status is not None:
            rows = [e for e in rows if e.status == status]
        return rows[:limit]

    async def fetch_due(self, now: datetime, batch_size: int) -> list[OutboxEntry]:
        rows = sorted(self._store.entries.values(), key=lambda e: (e.created_at, e.id))
        due = [
            e for e in rows
            if e.status in (OutboxStatus.PENDING, OutboxStatus.FAILED)
            and (e.next_retry_at is None or e.next_retry_at <= now)
        ]
        return due[:batch_size]

    async def count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for e in self._store.entries.values():
            counts[e.status] = counts.get(e.status, 0) + 1
        return counts

    def _replace(self, entry_id: int, **changes: Any) -> None:
        entry = self._store.entries[entry_id]
        self._store.entries[entry_id] = dataclasses.replace(entry, **changes)

    async def mark_syncing(self, entry_id: int, now: datetime) -> None:
        self._replace(entry_id, status=OutboxStatus.SYNCING.value, updated_at=now)

    async def mark_failed(
        self,
        entry_id: int,
        *,
        status: str,
        next_retry_at: datetime | None,
        error: str,
        now: datetime,
    ) -> None:
        entry = self._store.entries[entry_id]
        self._replace(
            entry_id,
            status=status,
            retry_count=entry.retry_count + 1,
            next_retry_at=next_retry_at,
            last_error=error,
            updated_at=now,
        )

    async def reset_in_flight(self, now: datetime) -> int:
        ids = [e.id for e in self._store.entries.values() if e.status == OutboxStatus.SYNCING]
        for entry_id in ids:
            self._replace(entry_id, status=OutboxStatus.PENDING.value, updated_at=now)
        return len(ids)

    async def requeue(self, entry_id: int, now: datetime) -> bool:
        entry = self._store.entries.get(entry_id)
        if entry is None or entry.status not in (OutboxStatus.FAILED, OutboxStatus.REJECTED):
            return False
        self._replace(entry_id, status=OutboxStatus.PENDING.value, next_retry_at=None, updated_at=now)
        return True

    async def delete(self, entry_id: int, *, skip_status: str | None = None) -> bool:
        entry = self._store.entries.get(entry_id)
        if entry is None or (skip_status is not None and entry.status == skip_status):
            return False
        del self._store.entries[entry_id]
        return True


@dataclass
class FakeCatalogReader:
    _store: FakeStore

    async def list_products(self, scope_key: str) -> list[Product]:
        return list(self._store.products.get(scope_key, []))

    async def get_product_by_barcode(self, scope_key: str, barcode: str) -> Product | None:
        for p in self._store.products.get(scope_key, []):
            if p.barcode == barcode:
                return p
        return None

    async def list_categories(self, scope_key: str) -> list[str]:
        return list(self._store.categories.get(scope_key, []))

    async def list_customers(self, scope_key: str, *, search: str | None = None) -> list[Customer]:
        rows = self._store.customers.get(scope_key, [])
        if search:
            rows = [c for c in rows if search.lower() in c.name.lower() or (c.phone and search in c.phone)]
        return list(rows)


@dataclass
class FakeCatalogWriter:
    """Stages writes; they land on the store only when the UoW commits."""

    _store: FakeStore
    _staged: list[Callable[[], None]]

    async def replace_products(self, scope_key: str, products: list[Product], fetched_at: datetime) -> None:
        rows = [dataclasses.replace(p, last_fetched_at=fetched_at) for p in products]
        self._staged.append(lambda: self._store.products.__setitem__(scope_key, rows))

    async def replace_categories(self, scope_key: str, names: list[str], fetched_at: datetime) -> None:
        rows = list(names)
        self._staged.append(lambda: self._store.categories.__setitem__(scope_key, rows))

    async def replace_customers(self, scope_key: str, customers: list[Customer], fetched_at: datetime) -> None:
        rows = [dataclasses.replace(c, last_fetched_at=fetched_at) for c in customers]
        self._staged.append(lambda: self._store.customers.__setitem__(scope_key, rows))


@dataclass
class FakeSyncState:
    _store: FakeStore
    _staged: list[Callable[[], None]]

    async def get_watermark(self, scope_key: str, key: str) -> datetime | None:
        return self._store.watermarks.get((scope_key, key))

    async def set_watermark(self, scope_key: str, key: str, value: datetime) -> None:
        self._staged.append(lambda: self._store.watermarks.__setitem__((scope_key, key), value))

    async def list_watermarks(self, scope_key: str) -> dict[str, datetime]:
        return {k: v for (s, k), v in self._store.watermarks.items() if s == scope_key}


class FakeUoW:
    """In-memory UoW for unit tests."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store
        self._staged: list[Callable[[], None]] = []
        self.outbox = FakeOutbox(store)
        self.catalog = FakeCatalogReader(store)
        self.catalog_w = FakeCatalogWriter(store, self._staged)
        self.sync_state = FakeSyncState(store, self._staged)
        self._committed = False

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        for apply in self._staged:
            apply()
        self._staged.clear()
        self._store.commits += 1
        self._committed = True

    async def rollback(self) -> None:
        self._staged.clear()

    async def __aenter__(self) -> FakeUoW:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.rollback()


class FakeGateway:
    """Scriptable RemoteGateway.

    ``order_errors`` maps the n-th submitted sale (by ``payload["items"][0]["productId"]``)
    to the exception to raise. ``gate`` holds ``create_order`` until set.
    """

    def __init__(self, store: FakeStore | None = None) -> None:
        self._store = store
        self.order_errors: dict[str, Exception] = {}
        self.order_calls: list[tuple[str, str]] = []
        self.syncing_seen: list[int] = []
        self.gate: asyncio.Event | None = None
        self.order_delay: float = 0
        self.products: list[Product] | Exception = []
        self.categories: list[str] | Exception = []
        self.customers: list[Customer] | Exception = []
        self.fetch_calls: list[str] = []
        self.fetch_delays: dict[str, float] = {}
        self.events: list[str] = []

    async def create_order(self, payload: dict[str, Any], idempotency_key: str) -> OrderRecord:
        product_id = payload["items"][0]["productId"]
        self.order_calls.append((product_id, idempotency_key))
        self.events.append("push")
        if self._store is not None:
            self.syncing_seen.append(self._store.syncing_count())
        if self.gate is not None:
            await self.gate.wait()
        if self.order_delay:
            await asyncio.sleep(self.order_delay)
        error = self.order_errors.get(product_id)
        if error is not None:
            raise error
        return OrderRecord(id=f"order-{product_id}", invoice_number=f"INV-{product_id}", total_amount=None, raw={})

    async def list_products(self, scope: SyncScope) -> list[Product]:
        return await self._answer("products", self.products)

    async def list_categories(self, scope: SyncScope) -> list[str]:
        return await self._answer("categories", self.categories)

    async def list_customers(self, scope: SyncScope) -> list[Customer]:
        return await self._answer("customers", self.customers)

    async def _answer(self, name: str, value: Any) -> Any:
        self.fetch_calls.append(name)
        self.events.append(f"pull:{name}")
        if name in self.fetch_delays:
            await asyncio.sleep(self.fetch_delays[name])
        if isinstance(value, Exception):
            raise value
        return list(value)


@dataclass
class FakeNotifier:
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def notify(self, event_type: str, data: dict[str, Any]) -> None:
        self.events.append((event_type, data))

    def types(self) -> list[str]:
        return [t for t, _ in self.events]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore) -> Callable[[], FakeUoW]:
    return lambda: FakeUoW(store)


@pytest.fixture
def gateway(store: FakeStore) -> FakeGateway:
    return FakeGateway(store)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def policy() -> RetryPolicy:
    return RetryPolicy()
