"""Password hashing and verification.

Uses bcrypt with automatic salting and a fixed work factor taken from
settings.bcrypt_work_factor unless one is passed explicitly.

bcrypt only reads the first 72 bytes of its input (and bcrypt 5 refuses
anything longer), so longer passwords are rejected before hashing.
"""

import logging

import bcrypt

from ..config import settings
from ..exceptions import HashingError, ValidationError, VerificationError

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


def password_too_long(plaintext: str) -> bool:
    """True if the UTF-8 encoded password exceeds what bcrypt accepts."""
    return len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """One-way password transformation and verification.

    Each call is independent; no state is shared between calls so hashing in
    one request never blocks another.
    """

    def __init__(self, work_factor: int | None = None):
        """Initialize the hasher.

        Args:
            work_factor: bcrypt cost. Defaults to settings.bcrypt_work_factor,
                read at hash time so tests can lower it.
        """
        self._work_factor = work_factor

    @property
    def work_factor(self) -> int:
        return self._work_factor or settings.bcrypt_work_factor

    def hash(self, plaintext: str) -> str:
        """Hash a password with a freshly generated salt.

        Args:
            plaintext: The password as entered by the user

        Returns:
            bcrypt hash string (60 characters, "$2b$" prefix)

        Raises:
            ValidationError: If the password is longer than 72 bytes
            HashingError: If bcrypt cannot produce a hash
        """
        if password_too_long(plaintext):
            raise ValidationError("invalid Password", {"field": "password"})

        try:
            salt = bcrypt.gensalt(rounds=self.work_factor)
            hashed = bcrypt.hashpw(plaintext.encode("utf-8"), salt)
        except (ValueError, OSError) as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise HashingError("Password hashing failed") from None
        return hashed.decode("utf-8")

    def verify(self, hashed: str, plaintext: str) -> bool:
        """Check a plaintext password against a stored hash.

        Comparison is done by bcrypt.checkpw, which is constant time. A
        password too long to have been hashed never matches.

        Returns:
            True on match, False on mismatch

        Raises:
            VerificationError: If the stored hash is malformed
        """
        too_long = password_too_long(plaintext)
        if too_long:
            # Still parse the hash so a malformed one is reported as such
            plaintext = ""

        try:
            matched = bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            raise VerificationError("Stored password hash is malformed") from None
        return matched and not too_long
