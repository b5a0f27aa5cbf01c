"""Database module for blog-core.

This module provides the Core API for database operations.
Core encapsulates connection management and provides access to the user and
post stores.

ARCHITECTURE:
- Core owns its connection (one connection per request, nothing shared)
- atomic=True: commit on successful context exit, rollback on error
- Each entity type gets an encapsulated operations class

COORDINATION PATTERN:
PostOperations receives the UserOperations of the same Core so that authors
are resolved on the same connection (and see uncommitted inserts):

    with get_core(atomic=True) as core:
        user = core.users.create(user)
        post = core.posts.create(post)  # post.author resolved via core.users
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Callable, TYPE_CHECKING

from ..auth.password import PasswordHasher
from ..config import settings
from ..utils import isodatetime

if TYPE_CHECKING:
    from .post import PostOperations
    from .user import UserOperations

SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "schema.sql"


class Core:
    """
    Database Core with user and post operations.

    Connection Lifecycle:
    - atomic=True: Connection closes on __exit__ from context manager
    - atomic=False: Caller closes it, e.g. with contextlib.closing(core)
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        atomic: bool = False,
        hasher: PasswordHasher | None = None,
        clock: Callable[[], datetime] = isodatetime.utcnow
    ):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
            hasher: Password hasher for user writes (default: PasswordHasher())
            clock: Source of "now" for timestamps
        """
        self._conn = connection
        self._atomic = atomic
        self._hasher = hasher or PasswordHasher()
        self._clock = clock
        self._user_ops = None
        self._post_ops = None

    @property
    def users(self) -> "UserOperations":
        """User operations, created on first access and cached."""
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn, hasher=self._hasher, clock=self._clock)
        return self._user_ops

    @property
    def posts(self) -> "PostOperations":
        """Post operations, sharing this Core's user operations for author lookup."""
        if self._post_ops is None:
            from .post import PostOperations
            self._post_ops = PostOperations(self._conn, self.users, clock=self._clock)
        return self._post_ops

    def __enter__(self) -> "Core":
        """Enter context manager for atomic transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(atomic=True) as core:"
            )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back the transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        self._conn.close()

    def __del__(self):
        """Close the connection if still open.

        Fallback for read Cores not closed explicitly; sqlite3 ignores a
        second close().
        """
        conn = getattr(self, "_conn", None)
        if conn is not None:
            conn.close()


def _create_connection() -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    # Enable foreign key constraints (required for SQLite)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(atomic: bool = False, hasher: PasswordHasher | None = None) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                Use for writes so they commit together.
                If False (default), use for reads.
        hasher: Optional password hasher override

    Examples:
        Read:
        >>> with closing(get_core()) as core:
        ...     post = core.posts.get_by_id(1)

        Write:
        >>> with get_core(atomic=True) as core:
        ...     core.posts.update(1, post)
    """
    conn = _create_connection()
    return Core(conn, atomic=atomic, hasher=hasher)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db():
    """Initialize database by running schema.sql if not already initialized."""
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db = sqlite3.connect(str(db_path))
    try:
        # Check if database is already initialized
        cursor = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            return

        db.executescript(SCHEMA_PATH.read_text())
        db.commit()
    finally:
        db.close()


def get_schema_version(conn: sqlite3.Connection) -> str:
    """Schema version string from _schema_metadata (e.g. '20261019')."""
    row = conn.execute(
        "SELECT value FROM _schema_metadata WHERE key = 'version'"
    ).fetchone()
    return row[0] if row else "unknown"
