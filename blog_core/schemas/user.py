"""User record schemas.

Fields default to empty values so that untrusted input can be parsed first
and then sanitized and validated by RecordSanitizer / FieldValidator, which
produce the field-ordered error messages clients rely on.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """A registered user.

    `password` holds the plaintext on the way in and the bcrypt hash once the
    record comes back from storage. It is never serialized in responses.
    """

    id: int = Field(default=0, description="Storage-assigned ID (0 = unassigned)")
    nickname: str = Field(default="", description="Unique display name")
    email: str = Field(default="", description="Unique email address")
    password: str = Field(default="", exclude=True, repr=False)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserPatch(BaseModel):
    """Fields that a profile update may change. None means "leave as is"."""

    nickname: str | None = None
    email: str | None = None
    password: str | None = Field(default=None, repr=False)
