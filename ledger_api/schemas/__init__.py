"""
Pydantic schemas package.
"""

from ledger_api.schemas.account import AccountCreate, AccountResponse, AccountSummary
from ledger_api.schemas.transaction import TransactionResponse, TransferRequest
from ledger_api.schemas.user import ProfileCreate, ProfileResponse, UserCreate, UserResponse

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountSummary",
    "ProfileCreate",
    "ProfileResponse",
    "TransactionResponse",
    "TransferRequest",
    "UserCreate",
    "UserResponse",
]
