"""
Transaction API endpoints.
Handles money transfers between accounts.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ledger_api.api.dependencies import get_ledger
from ledger_api.schemas import TransactionResponse, TransferRequest
from ledger_api.services import LedgerEngine

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transfer_data: TransferRequest,
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    Transfer money between two accounts.

    The debit, the credit and the transaction record are committed together
    or not at all.

    - **senderAccountId**: Account to debit
    - **receiverAccountId**: Account to credit
    - **amount**: Positive amount with at most two decimal places
    """
    return ledger.transfer(
        transfer_data.sender_account_id,
        transfer_data.receiver_account_id,
        transfer_data.amount,
    )


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    List transactions in creation order, with sender and receiver accounts.
    """
    return list(ledger.list_transactions(skip=skip, limit=limit))


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int = Path(..., ge=1),
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    Get a transaction by ID.
    """
    return ledger.get_transaction(transaction_id)
