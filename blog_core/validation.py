"""Field validation rules for User and Post records.

Rules are pure functions of the record (and, for users, the operation mode);
they never touch storage. Fields are checked in a fixed order and the first
failure is raised, so the error for a given input is always the same.
"""

from enum import Enum

from email_validator import EmailNotValidError, validate_email

from .auth.password import password_too_long
from .exceptions import ValidationError
from .schemas import Post, User


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    LOGIN = "login"


def _coerce_mode(mode: "ValidationMode | str") -> ValidationMode:
    """Accept enum members or case-insensitive names; unknown names mean create."""
    if isinstance(mode, ValidationMode):
        return mode
    try:
        return ValidationMode(str(mode).lower())
    except ValueError:
        return ValidationMode.CREATE


def _required(field: str) -> ValidationError:
    return ValidationError(f"required {field}", {"field": field.lower()})


def is_valid_email_format(email: str) -> bool:
    """Check address syntax only (no DNS / deliverability lookup)."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class FieldValidator:
    """Validation rules applied before any record is persisted."""

    def validate_user(self, user: User, mode: ValidationMode | str = ValidationMode.CREATE) -> None:
        """
        Validate a user record for the given operation.

        Order: Nickname (not checked on login), Password, Password length
        (not checked on login), Email, Email format.

        Raises:
            ValidationError: "required Nickname", "required Password",
                "invalid Password", "required Email" or "invalid Email"
        """
        mode = _coerce_mode(mode)

        if mode is not ValidationMode.LOGIN and user.nickname == "":
            raise _required("Nickname")
        if user.password == "":
            raise _required("Password")
        # On login an over-long password simply fails to match
        if mode is not ValidationMode.LOGIN and password_too_long(user.password):
            raise ValidationError("invalid Password", {"field": "password"})
        if user.email == "":
            raise _required("Email")
        if not is_valid_email_format(user.email):
            raise ValidationError("invalid Email", {"field": "email"})

    def validate_post(self, post: Post) -> None:
        """
        Validate a post record.

        Raises:
            ValidationError: "required Title", "required Content" or
                "required Author" (author_id below 1)
        """
        if post.title == "":
            raise _required("Title")
        if post.content == "":
            raise _required("Content")
        if post.author_id < 1:
            raise ValidationError("required Author", {"field": "author_id"})
