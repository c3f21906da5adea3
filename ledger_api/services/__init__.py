"""
Service layer package.
"""

from ledger_api.services.ledger import LedgerEngine, TransferStage
from ledger_api.services.users import UserService

__all__ = ["LedgerEngine", "TransferStage", "UserService"]
