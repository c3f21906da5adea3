"""
User and profile database models.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ledger_api.database import Base, utcnow


class User(Base):
    """
    User table - the password is only ever stored hashed.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(30), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
    accounts = relationship("Account", back_populates="owner")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class Profile(Base):
    """
    Profile table - identity details, one per user.
    """
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    age = Column(Integer, nullable=False)
    bio = Column(Text, nullable=True)
    identity_type = Column(String(50), nullable=False)
    identity_number = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False)

    user = relationship("User", back_populates="profile")
