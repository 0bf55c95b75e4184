"""
Primary store (backend A) — async key-value storage over SQLAlchemy.

Interface:
    await store.get(key)        -> StoredValue | None
    await store.set(key, value) -> bool

This plays the part of a host-provided storage API. Like such an API it
may not exist at all (PRIMARY_STORE_ENABLED=false, or the
database could not be reached at startup), in which case the persistence
gateway runs with no primary store.

Errors are NOT caught here. Database and driver exceptions propagate to the
persistence gateway, which is the single place that decides how a failing
backend is handled.
"""

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bank_sim.database import Base
from bank_sim.models.snapshot import StoredSnapshot


@dataclass(frozen=True)
class StoredValue:
    """A value read back from the primary store."""

    value: str


class PrimaryStore(Protocol):
    async def get(self, key: str) -> StoredValue | None: ...

    async def set(self, key: str, value: str) -> bool: ...


class SqlKeyValueStore:
    """
    Key-value store backed by the `stored_snapshots` table.

    Each call opens its own short-lived session, so the store holds no
    connection between saves.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessions = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """Create the key-value table if it doesn't exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def get(self, key: str) -> StoredValue | None:
        async with self._sessions() as session:
            row = await session.get(StoredSnapshot, key)
            if row is None:
                return None
            return StoredValue(value=row.value)

    async def set(self, key: str, value: str) -> bool:
        """Insert or replace the value under `key`. Last write wins."""
        async with self._sessions() as session:
            async with session.begin():
                row = await session.get(StoredSnapshot, key)
                if row is None:
                    session.add(StoredSnapshot(key=key, value=value))
                else:
                    row.value = value
        return True
