"""
Transfers router — the transfer form's submit action.

Endpoints:
  POST /transfers — Send money to a recipient

The ledger does all validation, so the rejection reasons are the same as
for any other caller:
  - invalid_amount             (not a number, zero, negative)
  - missing_recipient_name
  - missing_recipient_account
  - insufficient_funds         (includes requested and available amounts)

All rejections return 422 and leave the balance and history untouched.
The 201 response is the confirmation screen's content; clearing the form
is up to the client.
"""

from fastapi import APIRouter, Depends, status

from bank_sim.dependencies import get_ledger
from bank_sim.formatting import format_currency
from bank_sim.schemas.transaction import TransferRequest, TransferResponse
from bank_sim.services.ledger_service import Ledger

router = APIRouter()


@router.post(
    "",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer money to a recipient",
)
async def create_transfer(
    request: TransferRequest,
    ledger: Ledger = Depends(get_ledger),
):
    """
    Debit the balance and record the transfer.

    - **amount**: Text or number; thousands separators are allowed ("1,000.00")
    - **recipient_name**: Stored upper-cased
    - **recipient_account**: Any non-blank identifier
    - **description**: Optional; defaults to "No description"

    The transfer succeeds even if the snapshot could not be saved; that
    failure is logged on the server.
    """
    txn = await ledger.process_transfer(
        amount=request.amount,
        recipient_name=request.recipient_name,
        recipient_account=request.recipient_account,
        description=request.description,
    )

    return TransferResponse(
        transaction=txn,
        balance=txn.remaining_balance,
        formatted_amount=format_currency(txn.amount),
        completed_at=txn.timestamp,
    )
