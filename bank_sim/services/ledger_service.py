"""
Ledger service — the balance, the transaction log, and the transfer workflow.

THIS IS THE CORE OF THE SIMULATOR. The Ledger object owns the only copy of
the in-memory state:

  - balance: Decimal, never negative
  - transactions: newest first, append-at-front only, never edited

It is created once by the application root (see main.py) and injected into
the routers; there is no module-level state.

Transfer workflow:
    Idle -> Validating -> Debited -> Recorded -> Persisted -> Idle
    Idle -> Rejected -> Idle

  Validation failures raise a TransferRejectedError subclass and leave the
  ledger untouched. On success the balance is debited, a Transaction is
  recorded with the post-debit balance as its remaining balance, and the
  new state is handed to the persistence gateway.

Durability:
  A transfer that passed validation is committed in memory even if every
  storage backend fails. The failed save is logged; the debit is NOT rolled
  back. The next successful save (the next transfer) persists it.

Serialization:
  The balance check, debit, record and save all run under one asyncio.Lock.
  A second transfer submitted while one is in flight waits for the first to
  finish, so two transfers can never both pass the funds check against the
  same stale balance.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation

from bank_sim.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    MissingRecipientAccountError,
    MissingRecipientNameError,
    TransactionNotFoundError,
)
from bank_sim.formatting import format_currency
from bank_sim.reference_time import ReferenceClock
from bank_sim.schemas.ledger import DateGroup, LedgerState
from bank_sim.schemas.transaction import Transaction
from bank_sim.services.history_service import group_by_date
from bank_sim.services.persistence_service import PersistenceGateway

logger = logging.getLogger(__name__)


def parse_amount(raw: object) -> Decimal:
    """
    Parse a user-entered amount.

    Accepts Decimals, ints, floats and strings. Strings may carry thousands
    separators and surrounding whitespace ("  1,000.50 ").

    Raises:
        InvalidAmountError: If the value is not a finite number > 0, or has
            more than two decimal places.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmountError(raw)

    if isinstance(raw, Decimal):
        amount = raw
    else:
        text = str(raw).replace(",", "").strip()
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(raw) from None

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(raw)
    # Sub-cent amounts would round away in the debit
    if amount.normalize().as_tuple().exponent < -2:
        raise InvalidAmountError(raw)
    return amount


class Ledger:
    """
    Authoritative balance and transaction history for the single account.

    Args:
        gateway: Where snapshots are saved to and loaded from.
        initial_balance: Seed balance used when no snapshot exists.
        clock: Stamps transactions in the reference timezone.
        default_description: Stored when the user leaves the description blank.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        initial_balance: Decimal,
        clock: ReferenceClock,
        default_description: str = "No description",
    ):
        if initial_balance < 0:
            raise ValueError("initial_balance cannot be negative")
        self._gateway = gateway
        self._clock = clock
        self.default_description = default_description
        self._balance = initial_balance
        self._transactions: list[Transaction] = []
        self._last_id = 0
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """The transaction log, newest first. Read-only view."""
        return tuple(self._transactions)

    @property
    def is_busy(self) -> bool:
        """True while a transfer (or the startup load) is in flight."""
        return self._lock.locked()

    def state(self) -> LedgerState:
        """A copy of the current state, as handed to the persistence gateway."""
        return LedgerState(balance=self._balance, transactions=list(self._transactions))

    def get_transaction(self, transaction_id: int) -> Transaction:
        """
        Look up one transaction by id.

        Raises:
            TransactionNotFoundError: If no transaction has that id.
        """
        for txn in self._transactions:
            if txn.id == transaction_id:
                return txn
        raise TransactionNotFoundError(transaction_id)

    def history(self) -> list[DateGroup]:
        """The transaction log grouped by date, most recent date first."""
        return group_by_date(self._transactions)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """
        Restore state from storage, or persist the seed state on first run.

        Returns:
            True if a saved snapshot was restored, False if the ledger
            started from its seed values.
        """
        async with self._lock:
            restored = await self._gateway.load()

            if restored is None:
                logger.info(
                    f"Starting from default state - balance {format_currency(self._balance)}"
                )
                await self._gateway.save(self.state())
                return False

            self._balance = restored.balance
            self._transactions = list(restored.transactions)
            self._last_id = max((txn.id for txn in self._transactions), default=0)
            return True

    # ------------------------------------------------------------------
    # Transfer workflow
    # ------------------------------------------------------------------

    async def process_transfer(
        self,
        amount: object,
        recipient_name: str | None,
        recipient_account: str | None,
        description: str | None = None,
    ) -> Transaction:
        """
        Validate, debit, record and persist one outgoing transfer.

        Args:
            amount: Amount as entered (string, number or Decimal).
            recipient_name: Stored upper-cased.
            recipient_account: Free-form account identifier.
            description: Optional memo; blank means the default description.

        Returns:
            The recorded Transaction.

        Raises:
            InvalidAmountError: amount is not a finite number > 0.
            MissingRecipientNameError: recipient_name is blank.
            MissingRecipientAccountError: recipient_account is blank.
            InsufficientFundsError: amount exceeds the current balance.
        """
        parsed_amount = parse_amount(amount)

        name = (recipient_name or "").strip()
        if not name:
            raise MissingRecipientNameError()

        account = (recipient_account or "").strip()
        if not account:
            raise MissingRecipientAccountError()

        note = (description or "").strip() or self.default_description

        async with self._lock:
            if parsed_amount > self._balance:
                logger.info(
                    f"Transfer rejected - requested {format_currency(parsed_amount)}, "
                    f"available {format_currency(self._balance)}"
                )
                raise InsufficientFundsError(
                    requested=parsed_amount,
                    available=self._balance,
                )

            new_balance = self._balance - parsed_amount
            moment = self._clock.now()
            txn = Transaction(
                id=self._next_id(moment.epoch_ms),
                date=moment.date,
                time=moment.time,
                amount=parsed_amount,
                recipient_name=name.upper(),
                recipient_account=account,
                description=note,
                remaining_balance=new_balance,
                timestamp=moment.timestamp,
            )

            # Debit and record together; the record's remaining balance is
            # the balance as of this debit, whatever the save does next.
            self._balance = new_balance
            self._transactions.insert(0, txn)

            saved = await self._gateway.save(self.state())
            if not saved:
                logger.error(
                    f"Transfer {txn.id} kept in memory but not persisted "
                    f"(primary: {saved.primary.value}, fallback: {saved.fallback.value})"
                )

        logger.info(
            f"Transfer completed - {format_currency(parsed_amount)} to {txn.recipient_name}; "
            f"new balance {format_currency(self._balance)}, "
            f"{len(self._transactions)} transactions"
        )
        return txn

    def _next_id(self, epoch_ms: int) -> int:
        """Creation-time id, bumped past the previous one if the clock hasn't moved."""
        self._last_id = max(epoch_ms, self._last_id + 1)
        return self._last_id
