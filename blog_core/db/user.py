"""User persistence operations.

IMPORT CONVENTION:
- Core accesses these through core.users property
- Receives a PasswordHasher so passwords are hashed on every write

ID POLICY:
User IDs are SQLite INTEGER PRIMARY KEY values assigned on insert.
Client-supplied IDs are ignored.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Callable

from . import query
from .errors import translate_errors
from ..auth.password import PasswordHasher
from ..exceptions import ResourceNotFound
from ..schemas import User, UserPatch
from ..utils import isodatetime
from ..validation import FieldValidator, ValidationMode

logger = logging.getLogger(__name__)


def _row_to_user(row: sqlite3.Row) -> User:
    """Convert a users row to a User (password holds the stored hash)."""
    return User(
        id=row["id"],
        nickname=row["nickname"],
        email=row["email"],
        password=row["password"],
        created_at=isodatetime.to_datetime(row["created_at"]),
        updated_at=isodatetime.to_datetime(row["updated_at"]),
    )


class UserOperations:
    """User operations.

    Uniqueness of nickname and email is left to the storage constraints;
    nothing is pre-checked.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        hasher: PasswordHasher | None = None,
        clock: Callable[[], datetime] = isodatetime.utcnow
    ):
        """Initialize user operations.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            hasher: Password hasher used on create/update (default: PasswordHasher())
            clock: Source of "now" for timestamps
        """
        self._conn = conn
        self._hasher = hasher or PasswordHasher()
        self._clock = clock

    def create(self, user: User) -> User:
        """Hash the password and insert a new user.

        Args:
            user: Sanitized and validated user with plaintext password

        Returns:
            The persisted User (password field holds the hash)

        Raises:
            ConflictError: If nickname or email already exists
            HashingError: If the password cannot be hashed
            DatabaseError: On any other storage failure
        """
        password_hash = self._hasher.hash(user.password)
        now = self._clock()
        created_at = isodatetime.to_timestamp(user.created_at or now)
        updated_at = isodatetime.to_timestamp(user.updated_at or now)

        with translate_errors("User"):
            cursor = self._conn.execute(
                """INSERT INTO users (nickname, email, password, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (user.nickname, user.email, password_hash, created_at, updated_at)
            )

        logger.info(f"User created: {user.nickname} (id={cursor.lastrowid})")
        return self.get_by_id(cursor.lastrowid)

    def list(self, limit: int = 100) -> list[User]:
        """List users in insertion order.

        Args:
            limit: Maximum number of users to return (default: 100)
        """
        with translate_errors("User"):
            rows = self._conn.execute(
                "SELECT * FROM users ORDER BY id LIMIT ?",
                (limit,)
            ).fetchall()

        return [_row_to_user(row) for row in rows]

    def get_by_id(self, user_id: int) -> User:
        """Get user by ID.

        Raises:
            ResourceNotFound: If user_id doesn't exist
        """
        with translate_errors("User"):
            row = self._conn.execute(
                "SELECT * FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"User '{user_id}' not found",
                {"user_id": user_id}
            )

        return _row_to_user(row)

    def update(self, user_id: int, patch: UserPatch) -> User:
        """Apply a profile update and return the current record.

        Only fields set in the patch change; the password is re-hashed when
        present. updated_at is always refreshed.

        Raises:
            ResourceNotFound: If user_id doesn't exist
            ConflictError: If the new nickname or email is taken
            HashingError: If the password cannot be hashed
        """
        self.get_by_id(user_id)

        data = patch.model_dump(exclude_none=True)
        if "password" in data:
            data["password"] = self._hasher.hash(data["password"])
        data["updated_at"] = isodatetime.to_timestamp(self._clock())

        update_clause, params = query.build_update_clause(data, exclude={"id", "created_at"})
        params.append(user_id)

        with translate_errors("User"):
            self._conn.execute(
                f"UPDATE users SET {update_clause} WHERE id = ?",
                params
            )

        logger.info(f"User updated: id={user_id} fields={sorted(k for k in data if k != 'password')}")
        return self.get_by_id(user_id)

    def delete(self, user_id: int) -> int:
        """Physically delete a user (and, by cascade, their posts).

        Returns:
            Number of rows deleted; 0 means no such user
        """
        with translate_errors("User"):
            cursor = self._conn.execute(
                "DELETE FROM users WHERE id = ?",
                (user_id,)
            )

        if cursor.rowcount:
            logger.info(f"User deleted: id={user_id}")
        return cursor.rowcount

    def verify_credentials(self, email: str, password: str) -> User | None:
        """Check login credentials.

        Args:
            email: Email address the user registered with
            password: Plaintext password

        Returns:
            The User on success, None if the email is unknown or the
            password does not match

        Raises:
            ValidationError: If password or email is empty or the email is malformed
        """
        FieldValidator().validate_user(User(email=email, password=password), ValidationMode.LOGIN)

        with translate_errors("User"):
            row = self._conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (email,)
            ).fetchone()

        if row is None:
            return None

        user = _row_to_user(row)
        if not self._hasher.verify(user.password, password):
            return None

        return user
