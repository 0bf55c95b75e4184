"""
Transactions router — read access to the transaction history.

Endpoints:
  GET /transactions                   — List transactions, newest first
  GET /transactions/history           — Transactions grouped by date
  GET /transactions/{transaction_id}  — Get a single transaction

/history is declared before /{transaction_id} so the literal path is not
parsed as an id.
"""

from fastapi import APIRouter, Depends, Query

from bank_sim.dependencies import get_ledger
from bank_sim.schemas.ledger import DateGroup
from bank_sim.schemas.transaction import Transaction
from bank_sim.services.ledger_service import Ledger

router = APIRouter()


@router.get(
    "",
    response_model=list[Transaction],
    summary="List transactions",
)
async def list_transactions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    ledger: Ledger = Depends(get_ledger),
):
    """List recorded transfers, newest first, with pagination."""
    return list(ledger.transactions[offset:offset + limit])


@router.get(
    "/history",
    response_model=list[DateGroup],
    summary="Transaction history grouped by date",
)
async def get_history(ledger: Ledger = Depends(get_ledger)):
    """
    The full history grouped by calendar date (reference timezone).

    The most recent date comes first; within a date, transactions keep the
    order they were recorded in (newest first).
    """
    return ledger.history()


@router.get(
    "/{transaction_id}",
    response_model=Transaction,
    summary="Get a single transaction",
)
async def get_transaction(
    transaction_id: int,
    ledger: Ledger = Depends(get_ledger),
):
    """Get one transaction by its id. Returns 404 for unknown ids."""
    return ledger.get_transaction(transaction_id)
