"""
Persistence gateway — best-effort save/load of the ledger snapshot.

The snapshot is written to TWO independent backends:

  - Primary store (backend A): async key-value store, may be absent entirely
  - Fallback store (backend B): synchronous local key-value store

Durability policy:
  save() always attempts both backends, whatever happened to the other one,
  and succeeds if at least one write succeeded. load() prefers the primary
  store and falls back to the fallback store. Neither operation ever raises:
  every backend failure (missing API, driver error, disk error, malformed
  JSON) is caught here, logged, and turned into a return value. The ledger's
  startup and transfer paths therefore never have to handle storage
  exceptions.

Partial snapshots:
  load() restores whatever is well-formed. A missing, unreadable, negative
  or absurdly large balance keeps the default. A transactions value that is not a
  list keeps the history empty, and malformed transactions are skipped.
"""

import enum
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from bank_sim.formatting import format_currency, is_displayable
from bank_sim.schemas.ledger import LedgerSnapshot, LedgerState
from bank_sim.schemas.transaction import Transaction
from bank_sim.storage.fallback import FallbackStore
from bank_sim.storage.primary import PrimaryStore

logger = logging.getLogger(__name__)


class BackendOutcome(str, enum.Enum):
    """Result of one save attempt against one backend."""

    OK = "ok"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SaveResult:
    """
    Per-backend outcome of a save.

    Truthy when at least one backend stored the snapshot.
    """

    primary: BackendOutcome
    fallback: BackendOutcome

    @property
    def success(self) -> bool:
        return BackendOutcome.OK in (self.primary, self.fallback)

    def __bool__(self) -> bool:
        return self.success


def _coerce_decimal(value: Any) -> Decimal | None:
    """Convert a JSON scalar to a Decimal, or None if it isn't a finite, sane amount."""
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not is_displayable(number):
        return None
    return number


class PersistenceGateway:
    """
    Saves and loads LedgerState across the primary and fallback stores.

    Args:
        primary: Backend A, or None when the host has no primary store.
        fallback: Backend B, or None to disable it.
        key: The single key both backends store the snapshot under.
        default_balance: Balance used when a snapshot has no usable balance.
    """

    def __init__(
        self,
        primary: PrimaryStore | None,
        fallback: FallbackStore | None,
        *,
        key: str,
        default_balance: Decimal,
    ):
        self.primary = primary
        self.fallback = fallback
        self.key = key
        self.default_balance = default_balance

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(self, state: LedgerState) -> SaveResult:
        """
        Serialize `state` and write it to both backends.

        Returns:
            SaveResult with one outcome per backend. Never raises.
        """
        try:
            snapshot = LedgerSnapshot(
                balance=state.balance,
                transactions=state.transactions,
                last_update=datetime.now().astimezone().isoformat(),
            )
            blob = snapshot.model_dump_json(by_alias=True)
        except (ValueError, TypeError) as exc:
            logger.error(f"Could not serialize ledger snapshot: {exc}")
            return SaveResult(BackendOutcome.FAILED, BackendOutcome.FAILED)

        result = SaveResult(
            primary=await self._save_primary(blob),
            fallback=self._save_fallback(blob),
        )

        if result:
            logger.info(
                f"Snapshot saved - balance {format_currency(state.balance)}, "
                f"{len(state.transactions)} transactions "
                f"(primary: {result.primary.value}, fallback: {result.fallback.value})"
            )
        else:
            logger.error(
                f"All snapshot saves failed "
                f"(primary: {result.primary.value}, fallback: {result.fallback.value})"
            )
        return result

    async def _save_primary(self, blob: str) -> BackendOutcome:
        if self.primary is None:
            return BackendOutcome.UNAVAILABLE
        try:
            stored = await self.primary.set(self.key, blob)
        except Exception as exc:  # any backend fault is an outcome, not an error
            logger.warning(f"Primary store save failed: {exc!r}")
            return BackendOutcome.FAILED
        return BackendOutcome.OK if stored else BackendOutcome.FAILED

    def _save_fallback(self, blob: str) -> BackendOutcome:
        if self.fallback is None:
            return BackendOutcome.UNAVAILABLE
        try:
            self.fallback.set_item(self.key, blob)
        except Exception as exc:
            logger.warning(f"Fallback store save failed: {exc!r}")
            return BackendOutcome.FAILED
        return BackendOutcome.OK

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self) -> LedgerState | None:
        """
        Read the snapshot, primary store first.

        Returns:
            The restored LedgerState, or None when no backend has a usable
            snapshot (first run). Never raises.
        """
        data = await self._load_primary()
        if data is None:
            data = self._load_fallback()

        if data is None:
            logger.info("No saved snapshot found")
            return None

        state = self._restore(data)
        logger.info(
            f"Snapshot restored - balance {format_currency(state.balance)}, "
            f"{len(state.transactions)} transactions"
        )
        if data.get("lastUpdate"):
            logger.info(f"Snapshot last updated {data['lastUpdate']}")
        return state

    async def _load_primary(self) -> dict | None:
        if self.primary is None:
            return None
        try:
            stored = await self.primary.get(self.key)
            if stored is None or not stored.value:
                return None
            data = self._parse(stored.value)
        except Exception as exc:
            logger.warning(f"Could not load from primary store: {exc!r}")
            return None
        if data is not None:
            logger.info("Snapshot loaded from primary store")
        return data

    def _load_fallback(self) -> dict | None:
        if self.fallback is None:
            return None
        try:
            blob = self.fallback.get_item(self.key)
            if not blob:
                return None
            data = self._parse(blob)
        except Exception as exc:
            logger.warning(f"Could not load from fallback store: {exc!r}")
            return None
        if data is not None:
            logger.info("Snapshot loaded from fallback store")
        return data

    @staticmethod
    def _parse(blob: str) -> dict | None:
        """Parse a snapshot blob. Anything but a JSON object is unusable."""
        data = json.loads(blob)
        if not isinstance(data, dict):
            logger.warning(f"Ignoring snapshot of type {type(data).__name__}")
            return None
        return data

    def _restore(self, data: dict) -> LedgerState:
        balance = self.default_balance
        raw_balance = data.get("balance")
        if raw_balance is not None:
            parsed = _coerce_decimal(raw_balance)
            if parsed is None or parsed < 0:
                logger.warning(f"Ignoring unusable balance {raw_balance!r}")
            else:
                balance = parsed

        transactions: list[Transaction] = []
        raw_transactions = data.get("transactions")
        if isinstance(raw_transactions, list):
            skipped = 0
            for item in raw_transactions:
                try:
                    transactions.append(Transaction.model_validate(item))
                except ValidationError:
                    skipped += 1
            if skipped:
                logger.warning(f"Skipped {skipped} malformed transactions in snapshot")

        return LedgerState(balance=balance, transactions=transactions)
