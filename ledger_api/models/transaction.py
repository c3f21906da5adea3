"""
Transaction database model.
Append-only record of transfers between accounts.
"""

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from ledger_api.core.money import from_minor_units
from ledger_api.database import Base


class Transaction(Base):
    """
    Transaction table - one row per committed transfer.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount_minor > 0", name="ck_transactions_amount_positive"),
        CheckConstraint(
            "sender_account_id <> receiver_account_id",
            name="ck_transactions_distinct_accounts"
        ),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    receiver_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    amount_minor = Column(BigInteger, nullable=False)
    # Stamped by the ledger right before commit
    created_at = Column(DateTime(timezone=True), nullable=False)

    sender = relationship(
        "Account",
        foreign_keys=[sender_account_id],
        back_populates="sent_transactions"
    )
    receiver = relationship(
        "Account",
        foreign_keys=[receiver_account_id],
        back_populates="received_transactions"
    )

    @property
    def amount(self):
        return from_minor_units(self.amount_minor)

    def __repr__(self):
        return (
            f"<Transaction(id={self.id}, sender={self.sender_account_id}, "
            f"receiver={self.receiver_account_id}, amount={self.amount_minor})>"
        )
