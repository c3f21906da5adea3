"""
Error taxonomy for the ledger.

Every error the service raises on purpose derives from LedgerError and carries
a stable ``code`` that is returned to clients next to the message. The HTTP
status for each class is decided in ledger_api.api.exceptions.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class LedgerError(Exception):
    """Base class for expected, client-visible failures."""

    code = "LedgerError"

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class InvalidArgument(LedgerError):
    code = "InvalidArgument"


class InvalidOperation(LedgerError):
    code = "InvalidOperation"


class InvalidAmount(LedgerError):
    code = "InvalidAmount"


class ValidationFailed(LedgerError):
    code = "ValidationFailed"


class NotFound(LedgerError):
    code = "NotFound"


class AccountNotFound(NotFound):
    code = "AccountNotFound"


class TransactionNotFound(NotFound):
    code = "TransactionNotFound"


class UserNotFound(NotFound):
    code = "UserNotFound"


class InsufficientFunds(LedgerError):
    code = "InsufficientFunds"


class LockTimeout(LedgerError):
    code = "LockTimeout"


class StorageFailure(LedgerError):
    """Raised when the underlying database fails. Message is safe to show."""
    code = "StorageFailure"
