"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env
file as a fallback. Nothing here is secret: the simulator holds no real money
and has no authentication, so every field has a working default.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from bank_sim.config import settings
    print(settings.INITIAL_BALANCE)
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the bank simulator."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Bank Simulator"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # --- Primary store (backend A) ---
    # Set PRIMARY_STORE_ENABLED=false to run with the fallback store only,
    # the way the page runs in hosts that don't provide a storage API.
    PRIMARY_STORE_ENABLED: bool = True
    PRIMARY_STORE_URL: str = "sqlite+aiosqlite:///./bank_sim.db"

    # --- Fallback store (backend B) ---
    FALLBACK_STORE_DIR: str = "./data/local_storage"

    # Both backends address the snapshot under this single key
    STORAGE_KEY: str = "khan-bank-data"

    # --- Ledger ---
    INITIAL_BALANCE: Decimal = Decimal("400000000.00")
    CURRENCY: str = "MNT"
    # Transaction dates are stamped in this zone, whatever the host's zone is
    REFERENCE_TIMEZONE: str = "Asia/Ulaanbaatar"
    DEFAULT_DESCRIPTION: str = "No description"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    # None = JSON when stderr is not a TTY (containers), console otherwise
    LOG_JSON: bool | None = None

    # --- CORS ---
    # Origins allowed to make cross-origin requests (frontend URLs)
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
