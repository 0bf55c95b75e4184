"""
Custom exception classes and FastAPI exception handlers.

The ledger raises domain-specific errors (like InsufficientFundsError)
without importing HTTP concepts. The handler layer translates them into
HTTP responses, so ledger code stays testable without a web server.

Persistence problems are deliberately absent from this hierarchy: the
persistence gateway reports them as a SaveResult / None, never as an
exception.

Exception hierarchy:
    BankSimError (base)
    ├── TransferRejectedError            — transfer failed validation (no mutation)
    │   ├── InvalidAmountError           — amount not a finite number > 0
    │   ├── MissingRecipientNameError    — recipient name blank
    │   ├── MissingRecipientAccountError — recipient account blank
    │   └── InsufficientFundsError       — amount exceeds the balance
    └── TransactionNotFoundError         — history lookup by unknown id
"""

from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bank_sim.formatting import format_currency, is_displayable


def _json_amount(amount: Decimal) -> float | str:
    """A JSON number, or the Decimal's string form when a float would overflow."""
    return float(amount) if is_displayable(amount) else str(amount)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class BankSimError(Exception):
    """Base exception for all bank simulator domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Transfer rejections
# ---------------------------------------------------------------------------

class TransferRejectedError(BankSimError):
    """
    Raised when a transfer fails validation.

    A rejection never mutates the ledger; the user can correct the input
    and retry straight away. `error_type` is the machine-readable reason.
    """

    error_type = "transfer_rejected"


class InvalidAmountError(TransferRejectedError):
    """Raised when the amount is not a finite number greater than zero."""

    error_type = "invalid_amount"

    def __init__(self, raw_amount: object):
        self.raw_amount = raw_amount
        super().__init__(f"Invalid amount: {raw_amount!r}")


class MissingRecipientNameError(TransferRejectedError):
    """Raised when the recipient name is empty after trimming."""

    error_type = "missing_recipient_name"

    def __init__(self):
        super().__init__("Recipient name is required")


class MissingRecipientAccountError(TransferRejectedError):
    """Raised when the recipient account is empty after trimming."""

    error_type = "missing_recipient_account"

    def __init__(self):
        super().__init__("Recipient account is required")


class InsufficientFundsError(TransferRejectedError):
    """
    Raised when a transfer would drive the balance negative.

    Attributes:
        requested: The amount the user tried to send.
        available: The balance at the time of the check.
    """

    error_type = "insufficient_funds"

    def __init__(self, requested: Decimal, available: Decimal):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance: requested {format_currency(requested)}, "
            f"available {format_currency(available)}"
        )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class TransactionNotFoundError(BankSimError):
    """Raised when a transaction id is not in the history."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Each handler maps a domain exception to an HTTP status code and a
    consistent JSON body: {"detail": "...", "error_type": "..."}.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": exc.detail,
                "error_type": exc.error_type,
                "requested": _json_amount(exc.requested),
                "available": _json_amount(exc.available),
            },
        )

    @app.exception_handler(TransferRejectedError)
    async def transfer_rejected_handler(
        request: Request, exc: TransferRejectedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.detail, "error_type": exc.error_type},
        )

    @app.exception_handler(TransactionNotFoundError)
    async def transaction_not_found_handler(
        request: Request, exc: TransactionNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail, "error_type": "transaction_not_found"},
        )
