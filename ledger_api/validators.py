"""
Explicit validators for user input.

Each validator takes the raw decoded JSON body and returns a ValidationResult:
either a typed value or the full list of field errors. Validators compose, so
validate_user runs validate_profile on the nested profile object and prefixes
its field names.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import EmailStr, TypeAdapter, ValidationError

from ledger_api.core.errors import FieldError
from ledger_api.schemas.user import ProfileCreate, UserCreate

T = TypeVar("T")

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
MINIMUM_AGE = 18

_email_adapter = TypeAdapter(EmailStr)


@dataclass
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _path(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _check_string(
    data: dict,
    key: str,
    errors: List[FieldError],
    prefix: str = "",
    required: bool = True,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Optional[str]:
    name = _path(prefix, key)
    value = data.get(key)
    if value is None:
        if required:
            errors.append(FieldError(name, "is required"))
        return None
    if not isinstance(value, str):
        errors.append(FieldError(name, "must be a string"))
        return None
    if required and not value.strip():
        errors.append(FieldError(name, "must not be empty"))
        return None
    if min_length is not None and len(value) < min_length:
        errors.append(FieldError(name, f"must be at least {min_length} characters long"))
        return None
    if max_length is not None and len(value) > max_length:
        errors.append(FieldError(name, f"must be at most {max_length} characters long"))
        return None
    return value


def _check_email(data: dict, errors: List[FieldError], prefix: str = "") -> Optional[str]:
    value = _check_string(data, "email", errors, prefix)
    if value is None:
        return None
    try:
        return _email_adapter.validate_python(value)
    except ValidationError:
        errors.append(FieldError(_path(prefix, "email"), "must be a valid email"))
        return None


def _check_integer(
    data: dict,
    key: str,
    errors: List[FieldError],
    prefix: str = "",
    minimum: Optional[int] = None,
) -> Optional[int]:
    name = _path(prefix, key)
    value = data.get(key)
    if value is None:
        errors.append(FieldError(name, "is required"))
        return None
    # bool is an int subclass; 18.0 is accepted as an integer
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(FieldError(name, "must be an integer"))
        return None
    if isinstance(value, float):
        if not value.is_integer():
            errors.append(FieldError(name, "must be an integer"))
            return None
        value = int(value)
    if minimum is not None and value < minimum:
        errors.append(FieldError(name, f"must be greater than or equal to {minimum}"))
        return None
    return value


def validate_profile(data: Any, prefix: str = "profile") -> ValidationResult[ProfileCreate]:
    if not isinstance(data, dict):
        return ValidationResult(errors=[FieldError(prefix or "body", "must be an object")])

    errors: List[FieldError] = []
    age = _check_integer(data, "age", errors, prefix, minimum=MINIMUM_AGE)
    bio = _check_string(data, "bio", errors, prefix, required=False)
    identity_type = _check_string(data, "identityType", errors, prefix)
    identity_number = _check_string(data, "identityNumber", errors, prefix)
    address = _check_string(data, "address", errors, prefix)

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(
        value=ProfileCreate(
            age=age,
            bio=bio,
            identity_type=identity_type,
            identity_number=identity_number,
            address=address,
        )
    )


def validate_user(data: Any) -> ValidationResult[UserCreate]:
    """Check a user payload, including its nested profile."""
    if not isinstance(data, dict):
        return ValidationResult(errors=[FieldError("body", "must be an object")])

    errors: List[FieldError] = []
    name = _check_string(
        data, "name", errors, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH
    )
    email = _check_email(data, errors)
    password = _check_string(data, "password", errors, min_length=PASSWORD_MIN_LENGTH)

    profile = None
    if data.get("profile") is None:
        errors.append(FieldError("profile", "is required"))
    else:
        profile_result = validate_profile(data["profile"])
        errors.extend(profile_result.errors)
        profile = profile_result.value

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(
        value=UserCreate(name=name, email=email, password=password, profile=profile)
    )
