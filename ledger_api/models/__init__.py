"""
Database models package.
"""

from ledger_api.models.account import Account
from ledger_api.models.transaction import Transaction
from ledger_api.models.user import Profile, User

__all__ = ["Account", "Profile", "Transaction", "User"]
