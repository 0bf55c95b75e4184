"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — logging, storage backends, ledger startup/shutdown
  2. CORS middleware — allows frontend origins to make cross-origin requests
  3. Exception handlers — maps domain errors to HTTP responses
  4. Router registration — balance, transactions, transfers

Running locally:
    uvicorn bank_sim.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from bank_sim.config import settings
from bank_sim.database import engine
from bank_sim.exceptions import register_exception_handlers
from bank_sim.logging import configure_logging
from bank_sim.reference_time import ReferenceClock
from bank_sim.routers import balance, transactions, transfers
from bank_sim.services.ledger_service import Ledger
from bank_sim.services.persistence_service import PersistenceGateway
from bank_sim.storage.fallback import FileKeyValueStore
from bank_sim.storage.primary import SqlKeyValueStore

logger = logging.getLogger(__name__)


async def _open_primary_store() -> SqlKeyValueStore | None:
    """
    Open the primary store, or return None if it is disabled or unreachable.

    An unreachable database is not fatal; the ledger runs on the fallback
    store alone.
    """
    if not settings.PRIMARY_STORE_ENABLED:
        logger.info("Primary store disabled")
        return None

    store = SqlKeyValueStore(engine)
    try:
        await store.create_schema()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(f"Primary store unavailable, using fallback store only: {exc!r}")
        return None
    return store


def build_ledger(primary: SqlKeyValueStore | None) -> Ledger:
    """Wire the persistence gateway and the ledger from settings."""
    gateway = PersistenceGateway(
        primary=primary,
        fallback=FileKeyValueStore(settings.FALLBACK_STORE_DIR),
        key=settings.STORAGE_KEY,
        default_balance=settings.INITIAL_BALANCE,
    )
    return Ledger(
        gateway,
        initial_balance=settings.INITIAL_BALANCE,
        clock=ReferenceClock(settings.REFERENCE_TIMEZONE),
        default_description=settings.DEFAULT_DESCRIPTION,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Configures logging, opens the storage backends and restores the ledger
      (or persists the seed state on first run). The ledger lives on
      app.state for the lifetime of the process.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")

    ledger = build_ledger(await _open_primary_store())
    await ledger.initialize()
    app.state.ledger = ledger
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Simulated single-account banking: balance, transfers and history",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(balance.router, prefix="/balance", tags=["Balance"])
app.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
app.include_router(transfers.router, prefix="/transfers", tags=["Transfers"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for deployment probes."""
    return {"status": "ok", "version": settings.APP_VERSION}
