"""
Ledger engine.

Owns account balances and the transaction log. ``transfer`` is the only code
path that changes a balance; it runs the debit, the credit and the
transaction insert as one database transaction while holding the in-process
locks for both accounts.
"""

import enum
import logging
from decimal import Decimal
from typing import Callable, Dict, Iterator, Optional, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ledger_api.core.errors import (
    AccountNotFound,
    InsufficientFunds,
    InvalidAmount,
    InvalidOperation,
    LedgerError,
    StorageFailure,
    TransactionNotFound,
    UserNotFound,
)
from ledger_api.core.locks import AccountLockManager
from ledger_api.core.money import MAX_MINOR_UNITS, from_minor_units, to_minor_units
from ledger_api.database import Database, utcnow
from ledger_api.models import Account, Transaction, User
from ledger_api.schemas import AccountCreate, AccountResponse, TransactionResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransferStage(enum.Enum):
    """Progress of a single transfer; anything short of COMMITTED is rolled back."""
    VALIDATING = "validating"
    DEBITING = "debiting"
    CREDITING = "crediting"
    RECORDING = "recording"
    COMMITTED = "committed"


class LedgerEngine:
    """
    Accounts and transfers.

    One engine is shared by every request: it holds the storage handle and
    the lock manager that serializes transfers touching the same account.
    """

    def __init__(
        self,
        database: Database,
        locks: Optional[AccountLockManager] = None,
        lock_timeout: Optional[float] = None,
        batch_size: int = 500,
    ):
        self.database = database
        self.locks = locks or AccountLockManager()
        self.lock_timeout = lock_timeout
        self.batch_size = batch_size

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def open_account(self, payload: AccountCreate) -> AccountResponse:
        balance_minor = to_minor_units(payload.balance, allow_zero=True)

        with self.database.session() as session:
            try:
                if session.get(User, payload.user_id) is None:
                    raise UserNotFound(f"User {payload.user_id} not found")
                account = Account(
                    user_id=payload.user_id,
                    account_name=payload.account_name,
                    balance_minor=balance_minor,
                )
                session.add(account)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("account.create.failed", extra={"user_id": payload.user_id})
                raise StorageFailure("Error creating account") from exc

            logger.info(
                "account.created",
                extra={"account_id": account.id, "user_id": account.user_id},
            )
            return AccountResponse.model_validate(account)

    def transfer(
        self,
        sender_account_id: int,
        receiver_account_id: int,
        amount: Decimal,
        timeout: Optional[float] = None,
    ) -> TransactionResponse:
        """
        Move ``amount`` from sender to receiver and record the transaction.

        Preconditions are checked in this order, each with its own error:
        self-transfer (InvalidOperation), amount (InvalidAmount), unknown
        account (AccountNotFound), balance (InsufficientFunds). Waiting for
        contended accounts is bounded by ``timeout`` seconds (LockTimeout).
        Either every effect is committed or none is.
        """
        if sender_account_id == receiver_account_id:
            raise InvalidOperation("Cannot transfer to the same account")
        amount_minor = to_minor_units(amount)

        if timeout is None:
            timeout = self.lock_timeout

        with self.locks.acquire((sender_account_id, receiver_account_id), timeout=timeout):
            with self.database.session() as session:
                return self._apply_transfer(
                    session, sender_account_id, receiver_account_id, amount_minor
                )

    def _apply_transfer(
        self,
        session: Session,
        sender_account_id: int,
        receiver_account_id: int,
        amount_minor: int,
    ) -> TransactionResponse:
        stage = TransferStage.VALIDATING
        try:
            accounts = self._lock_accounts(session, (sender_account_id, receiver_account_id))
            sender = accounts.get(sender_account_id)
            if sender is None:
                raise AccountNotFound(f"Account {sender_account_id} not found")
            receiver = accounts.get(receiver_account_id)
            if receiver is None:
                raise AccountNotFound(f"Account {receiver_account_id} not found")

            if sender.balance_minor < amount_minor:
                raise InsufficientFunds(
                    f"Insufficient funds. Balance: {sender.balance}, "
                    f"Required: {from_minor_units(amount_minor)}"
                )
            if receiver.balance_minor > MAX_MINOR_UNITS - amount_minor:
                raise InvalidAmount("Transfer would exceed the maximum account balance")

            stage = TransferStage.DEBITING
            sender.balance_minor -= amount_minor

            stage = TransferStage.CREDITING
            receiver.balance_minor += amount_minor

            stage = TransferStage.RECORDING
            transaction = Transaction(
                sender_account_id=sender_account_id,
                receiver_account_id=receiver_account_id,
                amount_minor=amount_minor,
                created_at=utcnow(),
            )
            transaction.sender = sender
            transaction.receiver = receiver
            session.add(transaction)
            session.commit()
            stage = TransferStage.COMMITTED
        except LedgerError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception(
                "transfer.failed",
                extra={
                    "stage": stage.value,
                    "sender_account_id": sender_account_id,
                    "receiver_account_id": receiver_account_id,
                },
            )
            raise StorageFailure("Error creating transaction") from exc

        logger.info(
            "transfer.committed",
            extra={
                "transaction_id": transaction.id,
                "sender_account_id": sender_account_id,
                "receiver_account_id": receiver_account_id,
                "amount_minor": amount_minor,
            },
        )
        return TransactionResponse.model_validate(transaction)

    def _lock_accounts(self, session: Session, account_ids: Sequence[int]) -> Dict[int, Account]:
        """
        Load the accounts with row-level locks (SELECT FOR UPDATE), lowest
        id first. Backends without row locks (SQLite) rely on the in-process
        locks alone.
        """
        stmt = (
            select(Account)
            .where(Account.id.in_(sorted(set(account_ids))))
            .order_by(Account.id)
            .with_for_update()
        )
        return {account.id: account for account in session.scalars(stmt)}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_account(self, account_id: int) -> AccountResponse:
        with self.database.session() as session:
            account = self._read(lambda: session.get(Account, account_id))
            if account is None:
                raise AccountNotFound(f"Account {account_id} not found")
            return AccountResponse.model_validate(account)

    def get_transaction(self, transaction_id: int) -> TransactionResponse:
        with self.database.session() as session:
            stmt = (
                select(Transaction)
                .options(joinedload(Transaction.sender), joinedload(Transaction.receiver))
                .where(Transaction.id == transaction_id)
            )
            transaction = self._read(lambda: session.scalars(stmt).first())
            if transaction is None:
                raise TransactionNotFound(f"Transaction {transaction_id} not found")
            return TransactionResponse.model_validate(transaction)

    def list_accounts(self, skip: int = 0, limit: Optional[int] = None) -> Iterator[AccountResponse]:
        """Accounts in creation order, fetched lazily in batches."""
        return self._iterate(
            Account,
            lambda stmt: stmt,
            AccountResponse.model_validate,
            skip,
            limit,
        )

    def list_transactions(
        self, skip: int = 0, limit: Optional[int] = None
    ) -> Iterator[TransactionResponse]:
        """Transactions in creation order, with sender and receiver resolved."""
        return self._iterate(
            Transaction,
            lambda stmt: stmt.options(
                joinedload(Transaction.sender), joinedload(Transaction.receiver)
            ),
            TransactionResponse.model_validate,
            skip,
            limit,
        )

    def _iterate(
        self,
        model,
        decorate: Callable,
        convert: Callable[[object], T],
        skip: int,
        limit: Optional[int],
    ) -> Iterator[T]:
        # Keyset pagination on the primary key keeps each batch query cheap
        # and holds at most batch_size rows in memory.
        last_id = None
        remaining = limit
        offset = skip
        while remaining is None or remaining > 0:
            size = self.batch_size if remaining is None else min(self.batch_size, remaining)
            stmt = decorate(select(model)).order_by(model.id).limit(size)
            if last_id is None:
                stmt = stmt.offset(offset)
            else:
                stmt = stmt.where(model.id > last_id)

            with self.database.session() as session:
                rows = self._read(lambda: list(session.scalars(stmt).unique()))
                batch = [convert(row) for row in rows]

            for item in batch:
                yield item
            if len(rows) < size:
                return
            last_id = rows[-1].id
            if remaining is not None:
                remaining -= len(rows)

    @staticmethod
    def _read(query: Callable[[], T]) -> T:
        try:
            return query()
        except SQLAlchemyError as exc:
            logger.exception("ledger.read.failed")
            raise StorageFailure("Error reading from the ledger") from exc
