"""
Pydantic schemas for Account API requests and responses.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from ledger_api.schemas.base import CamelModel


class AccountCreate(CamelModel):
    """Schema for opening a new account."""
    user_id: int = Field(..., ge=1, description="Owning user")
    account_name: str = Field(..., min_length=1, max_length=100, description="Account display name")
    # Range and precision are checked by the ledger so they surface as InvalidAmount
    balance: Decimal = Field(default=Decimal("0.00"), allow_inf_nan=True, description="Initial balance")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": 1,
                "accountName": "Savings Account",
                "balance": 1000.00
            }
        }
    )


class AccountSummary(CamelModel):
    """Account fields embedded in transaction responses."""
    id: int
    user_id: int
    account_name: str


class AccountResponse(CamelModel):
    """Schema for account response."""
    id: int
    user_id: int
    account_name: str
    balance: Decimal
    created_at: datetime
