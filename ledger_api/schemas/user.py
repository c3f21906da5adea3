"""
Pydantic schemas for User API responses and validated user input.

Incoming user payloads are checked by ledger_api.validators, which builds
UserCreate only once every rule passed.
"""

from datetime import datetime
from typing import Optional

from ledger_api.schemas.base import CamelModel


class ProfileCreate(CamelModel):
    age: int
    identity_type: str
    identity_number: str
    address: str
    bio: Optional[str] = None


class UserCreate(CamelModel):
    name: str
    email: str
    password: str
    profile: ProfileCreate


class ProfileResponse(CamelModel):
    id: int
    age: int
    identity_type: str
    identity_number: str
    address: str
    bio: Optional[str] = None


class UserResponse(CamelModel):
    """Schema for user response. Never includes the password."""
    id: int
    name: str
    email: str
    created_at: datetime
    profile: Optional[ProfileResponse] = None
