"""
Test fixtures for the bank simulator test suite.

This module provides shared fixtures used across all test files:

  - db_engine / primary_store: Fresh in-memory SQLite primary store per test
  - fallback_store: File-backed fallback store in a per-test tmp directory
  - gateway: PersistenceGateway over both stores
  - now / reference_clock: A controllable clock (starts 2026-10-19 06:30 UTC,
    which is 14:30 in Ulaanbaatar)
  - ledger: An initialized Ledger on top of the gateway
  - client: Async HTTP test client wired to that ledger

Failure injection:
  broken_primary / broken_fallback raise on every call, the way an
  unavailable host storage API or a full disk would. Tests build their own
  gateways from them.

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
  - We override the get_ledger dependency instead of running the app
    lifespan, so every HTTP test starts from a fresh, known ledger.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine

from bank_sim.dependencies import get_ledger
from bank_sim.main import app
from bank_sim.reference_time import ReferenceClock
from bank_sim.services.ledger_service import Ledger
from bank_sim.services.persistence_service import PersistenceGateway
from bank_sim.storage.fallback import FileKeyValueStore
from bank_sim.storage.primary import SqlKeyValueStore


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

STORAGE_KEY = "khan-bank-data"
INITIAL_BALANCE = Decimal("400000000.00")
REFERENCE_TIMEZONE = "Asia/Ulaanbaatar"
START_TIME = datetime(2026, 10, 19, 6, 30, tzinfo=timezone.utc)


class SteppingClock:
    """A callable clock that only moves when a test advances it."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class BrokenPrimaryStore:
    """Primary store whose every call fails."""

    def __init__(self):
        self.calls = 0

    async def get(self, key):
        self.calls += 1
        raise RuntimeError("storage API unavailable")

    async def set(self, key, value):
        self.calls += 1
        raise RuntimeError("storage API unavailable")


class BrokenFallbackStore:
    """Fallback store whose every call fails."""

    def __init__(self):
        self.calls = 0

    def get_item(self, key):
        self.calls += 1
        raise OSError("quota exceeded")

    def set_item(self, key, value):
        self.calls += 1
        raise OSError("quota exceeded")


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def primary_store(db_engine):
    """Primary store with its table created."""
    store = SqlKeyValueStore(db_engine)
    await store.create_schema()
    return store


@pytest.fixture
def fallback_store(tmp_path):
    """Fallback store writing into this test's tmp directory."""
    return FileKeyValueStore(tmp_path / "local_storage")


@pytest.fixture
def gateway(primary_store, fallback_store):
    """Persistence gateway over two working backends."""
    return PersistenceGateway(
        primary_store,
        fallback_store,
        key=STORAGE_KEY,
        default_balance=INITIAL_BALANCE,
    )


@pytest.fixture
def broken_primary():
    return BrokenPrimaryStore()


@pytest.fixture
def broken_fallback():
    return BrokenFallbackStore()


@pytest.fixture
def now():
    return SteppingClock(START_TIME)


@pytest.fixture
def reference_clock(now):
    return ReferenceClock(REFERENCE_TIMEZONE, now=now)


@pytest.fixture
def make_ledger(reference_clock):
    """Factory for ledgers over an arbitrary gateway (not yet initialized)."""

    def _make(gw: PersistenceGateway) -> Ledger:
        return Ledger(
            gw,
            initial_balance=INITIAL_BALANCE,
            clock=reference_clock,
            default_description="No description",
        )

    return _make


@pytest_asyncio.fixture
async def ledger(gateway, make_ledger):
    """An initialized ledger on first run: seed balance, empty history."""
    ledger = make_ledger(gateway)
    await ledger.initialize()
    return ledger


@pytest_asyncio.fixture
async def client(ledger):
    """
    Async HTTP test client with the test ledger injected.

    This overrides the get_ledger dependency so all requests hit the
    per-test ledger instead of the one the lifespan would build.
    """
    app.dependency_overrides[get_ledger] = lambda: ledger

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
