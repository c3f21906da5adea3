"""
Pydantic schemas for Transaction API requests and responses.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from ledger_api.schemas.account import AccountSummary
from ledger_api.schemas.base import CamelModel


class TransferRequest(CamelModel):
    """Schema for initiating a transfer."""
    sender_account_id: int = Field(..., ge=1, description="Account to debit")
    receiver_account_id: int = Field(..., ge=1, description="Account to credit")
    amount: Decimal = Field(..., allow_inf_nan=True, description="Transfer amount (must be positive)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "senderAccountId": 1,
                "receiverAccountId": 2,
                "amount": 100.50
            }
        }
    )


class TransactionResponse(CamelModel):
    """Schema for transaction response, with both accounts resolved."""
    id: int
    sender_account_id: int
    receiver_account_id: int
    amount: Decimal
    created_at: datetime
    sender: AccountSummary
    receiver: AccountSummary
