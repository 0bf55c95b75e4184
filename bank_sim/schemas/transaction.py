"""
Pydantic schemas for transactions and transfers.

Monetary amounts are Decimals in Python (exact arithmetic) and plain JSON
numbers on the wire, which keeps the persisted snapshot readable by any
JSON client. Transaction fields use camelCase aliases (recipientName,
remainingBalance, ...) because that is the snapshot format; transfer request
fields mirror the form inputs.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel


# Decimal in Python, number in JSON
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class Transaction(BaseModel):
    """
    One recorded outgoing transfer. Immutable once created.

    `remaining_balance` is the balance right after this transfer was
    debited. It is a historical record and is never recomputed.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Creation time in ms since epoch; doubles as identity and sort key
    id: int
    date: str
    time: str
    amount: Money = Field(gt=0)
    recipient_name: str = Field(min_length=1)
    recipient_account: str = Field(min_length=1)
    description: str
    remaining_balance: Money = Field(ge=0)
    timestamp: str


class TransferRequest(BaseModel):
    """
    Request body for POST /transfers — the four transfer form fields.

    `amount` is kept as the raw text the user typed ("1,000.00"); the
    ledger parses and validates it so every entry point gets the same
    rejection reasons. Blank name/account are also left for the ledger.
    """

    amount: str = Field(description="Amount as typed; thousands separators allowed")
    recipient_name: str = ""
    recipient_account: str = ""
    description: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, value):
        """Accept JSON numbers as well as strings."""
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value


class TransferResponse(BaseModel):
    """Confirmation payload returned after a successful transfer."""

    transaction: Transaction
    balance: Money
    formatted_amount: str
    completed_at: str
