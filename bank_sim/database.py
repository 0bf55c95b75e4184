"""
Database engine and base model class for the primary store.

The primary store (backend A) is a key-value table behind SQLAlchemy 2.0 with
async support. Key components:

  - engine: The async database engine
  - Base: Declarative base class that all ORM models inherit from

Only the primary store talks to the database. The ledger never opens a
session itself; it goes through the persistence gateway, which treats the
database as one of two interchangeable best-effort backends.

Swapping SQLite for PostgreSQL only requires changing PRIMARY_STORE_URL
(to use the asyncpg driver).
"""

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import DeclarativeBase

from bank_sim.config import settings


# echo=True in debug mode logs all SQL statements.
engine = create_async_engine(
    settings.PRIMARY_STORE_URL,
    echo=settings.DEBUG,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Provides metadata tracking so the primary store can create its table
    on startup.
    """
    pass
