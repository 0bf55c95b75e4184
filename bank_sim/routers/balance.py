"""
Balance router — the home screen's balance display.

Endpoints:
  GET /balance — Current balance, raw and formatted
"""

from fastapi import APIRouter, Depends

from bank_sim.config import settings
from bank_sim.dependencies import get_ledger
from bank_sim.formatting import format_currency
from bank_sim.schemas.ledger import BalanceResponse
from bank_sim.services.ledger_service import Ledger

router = APIRouter()


@router.get(
    "",
    response_model=BalanceResponse,
    summary="Check the account balance",
)
async def get_balance(ledger: Ledger = Depends(get_ledger)):
    """
    Get the current balance.

    `formatted_balance` is ready for display (e.g. "399,999,000.00 MNT").
    """
    return BalanceResponse(
        balance=ledger.balance,
        formatted_balance=format_currency(ledger.balance),
        currency=settings.CURRENCY,
        transaction_count=len(ledger.transactions),
    )
