"""
Pydantic schemas for ledger state, its persisted snapshot, and read views.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bank_sim.schemas.transaction import Money, Transaction


class LedgerState(BaseModel):
    """Current balance plus the transaction log, newest first."""

    balance: Money
    transactions: list[Transaction] = Field(default_factory=list)


class LedgerSnapshot(LedgerState):
    """
    The serialized form written to the storage backends.

    JSON shape: {"balance": ..., "transactions": [...], "lastUpdate": "..."}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    last_update: str


class BalanceResponse(BaseModel):
    """Response for GET /balance."""

    balance: Money
    formatted_balance: str
    currency: str
    transaction_count: int


class DateGroup(BaseModel):
    """All transactions that share one reference-timezone calendar date."""

    date: str
    transactions: list[Transaction]
