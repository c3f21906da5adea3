"""
User service: creates users together with their profile.
"""

import logging
from typing import List

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ledger_api.core.errors import FieldError, StorageFailure, ValidationFailed
from ledger_api.models import Profile, User
from ledger_api.schemas import UserCreate, UserResponse

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_DUPLICATE_EMAIL = FieldError("email", "is already registered")


class UserService:
    def __init__(self, session: Session):
        self.session = session

    def create_user(self, payload: UserCreate) -> UserResponse:
        try:
            existing = self.session.scalars(
                select(User.id).where(User.email == payload.email)
            ).first()
            if existing is not None:
                raise ValidationFailed("Validation failed", [_DUPLICATE_EMAIL])

            user = User(
                name=payload.name,
                email=payload.email,
                password_hash=pwd_context.hash(payload.password),
                profile=Profile(**payload.profile.model_dump()),
            )
            self.session.add(user)
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            self.session.rollback()
            raise ValidationFailed("Validation failed", [_DUPLICATE_EMAIL])
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("user.create.failed")
            raise StorageFailure("Error creating user") from exc

        logger.info("user.created", extra={"user_id": user.id})
        return UserResponse.model_validate(user)

    def list_users(self) -> List[UserResponse]:
        try:
            users = self.session.scalars(
                select(User).options(selectinload(User.profile)).order_by(User.id)
            ).all()
        except SQLAlchemyError as exc:
            logger.exception("user.list.failed")
            raise StorageFailure("Error fetching users") from exc
        return [UserResponse.model_validate(user) for user in users]
