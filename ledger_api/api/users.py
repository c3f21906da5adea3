"""
User API endpoints.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from ledger_api.api.dependencies import get_user_service
from ledger_api.core.errors import ValidationFailed
from ledger_api.schemas import UserResponse
from ledger_api.services import UserService
from ledger_api.validators import validate_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: Any = Body(...),
    users: UserService = Depends(get_user_service)
):
    """
    Create a user with its profile.

    - **name**: 3 to 30 characters
    - **email**: Valid, unused email address
    - **password**: At least 6 characters
    - **profile**: `age` (18+), `identityType`, `identityNumber`, `address`, optional `bio`
    """
    result = validate_user(payload)
    if not result.ok:
        raise ValidationFailed("Validation failed", result.errors)
    return users.create_user(result.value)


@router.get("", response_model=List[UserResponse])
def list_users(users: UserService = Depends(get_user_service)):
    """
    List users with their profiles.
    """
    return users.list_users()
