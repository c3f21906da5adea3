"""
Account database model.
Represents bank accounts owned by users.
"""

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ledger_api.core.money import from_minor_units
from ledger_api.database import Base, utcnow


class Account(Base):
    """
    Account table - stores balances in integer minor units (cents).
    """
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance_minor >= 0", name="ck_accounts_balance_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    account_name = Column(String(100), nullable=False)
    balance_minor = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    owner = relationship("User", back_populates="accounts")
    sent_transactions = relationship(
        "Transaction",
        foreign_keys="Transaction.sender_account_id",
        back_populates="sender"
    )
    received_transactions = relationship(
        "Transaction",
        foreign_keys="Transaction.receiver_account_id",
        back_populates="receiver"
    )

    @property
    def balance(self):
        return from_minor_units(self.balance_minor)

    def __repr__(self):
        return f"<Account(id={self.id}, user_id={self.user_id}, balance={self.balance_minor})>"
