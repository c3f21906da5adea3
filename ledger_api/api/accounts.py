"""
Account API endpoints.
Handles account creation and retrieval.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ledger_api.api.dependencies import get_ledger
from ledger_api.schemas import AccountCreate, AccountResponse
from ledger_api.services import LedgerEngine

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account_data: AccountCreate,
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    Open a new account for an existing user.

    - **userId**: Owner of the account
    - **accountName**: Name of the account
    - **balance**: Starting balance (default: 0.00)
    """
    return ledger.open_account(account_data)


@router.get("", response_model=List[AccountResponse])
def list_accounts(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    List accounts in creation order.

    - **skip**: Number of records to skip (default: 0)
    - **limit**: Maximum number of records to return (default: all)
    """
    return list(ledger.list_accounts(skip=skip, limit=limit))


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int = Path(..., ge=1),
    ledger: LedgerEngine = Depends(get_ledger)
):
    """
    Get account details by ID.
    """
    return ledger.get_account(account_id)
