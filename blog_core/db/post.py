"""Post persistence operations.

IMPORT CONVENTION:
- Core accesses these through core.posts property
- Receives the UserOperations of the same Core to resolve authors

Every post returned from here has `author` filled in by looking up author_id
at read time. The author is never stored in the posts table.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Callable, TYPE_CHECKING

from .errors import is_foreign_key_violation, translate_errors
from ..exceptions import ResourceNotFound, ValidationError
from ..schemas import Post
from ..utils import isodatetime

if TYPE_CHECKING:
    from .user import UserOperations

logger = logging.getLogger(__name__)


def _row_to_post(row: sqlite3.Row) -> Post:
    return Post(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        author_id=row["author_id"],
        created_at=isodatetime.to_datetime(row["created_at"]),
        updated_at=isodatetime.to_datetime(row["updated_at"]),
    )


class PostOperations:
    """Post operations with author enrichment and ownership-checked delete."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        users: "UserOperations",
        clock: Callable[[], datetime] = isodatetime.utcnow
    ):
        """Initialize post operations.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            users: User operations used to resolve post authors
            clock: Source of "now" for timestamps
        """
        self._conn = conn
        self._users = users
        self._clock = clock

    def _with_author(self, post: Post) -> Post:
        post.author = self._users.get_by_id(post.author_id)
        return post

    def _get_row(self, post_id: int) -> sqlite3.Row:
        with translate_errors("Post"):
            row = self._conn.execute(
                "SELECT * FROM posts WHERE id = ?",
                (post_id,)
            ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"Post '{post_id}' not found",
                {"post_id": post_id}
            )

        return row

    def create(self, post: Post) -> Post:
        """Insert a post and return it with its author attached.

        Args:
            post: Sanitized and validated post

        Raises:
            ConflictError: If the title already exists
            ValidationError: If author_id does not reference an existing user
                (nothing is inserted)
            DatabaseError: On any other storage failure
        """
        now = self._clock()
        created_at = isodatetime.to_timestamp(post.created_at or now)
        updated_at = isodatetime.to_timestamp(post.updated_at or now)

        with translate_errors("Post"):
            try:
                cursor = self._conn.execute(
                    """INSERT INTO posts (title, content, author_id, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?)""",
                    (post.title, post.content, post.author_id, created_at, updated_at)
                )
            except sqlite3.IntegrityError as e:
                if is_foreign_key_violation(e):
                    raise ValidationError(
                        f"Author '{post.author_id}' not found",
                        {"field": "author_id", "author_id": post.author_id}
                    ) from e
                raise

        logger.info(f"Post created: id={cursor.lastrowid} author_id={post.author_id}")
        return self.get_by_id(cursor.lastrowid)

    def list(self, limit: int = 100) -> list[Post]:
        """List posts in insertion order, each with its author.

        If any author lookup fails the whole call fails; partial results are
        never returned.

        Args:
            limit: Maximum number of posts to return (default: 100)

        Raises:
            ResourceNotFound: If a post references a missing author
        """
        with translate_errors("Post"):
            rows = self._conn.execute(
                "SELECT * FROM posts ORDER BY id LIMIT ?",
                (limit,)
            ).fetchall()

        return [self._with_author(_row_to_post(row)) for row in rows]

    def get_by_id(self, post_id: int) -> Post:
        """Get post by ID with its author.

        Raises:
            ResourceNotFound: If post_id doesn't exist
        """
        return self._with_author(_row_to_post(self._get_row(post_id)))

    def update(self, post_id: int, post: Post) -> Post:
        """Update title and content.

        author_id and created_at are never changed here.

        Raises:
            ResourceNotFound: If post_id doesn't exist
            ConflictError: If the new title is taken
        """
        self._get_row(post_id)

        now = isodatetime.to_timestamp(self._clock())
        with translate_errors("Post"):
            self._conn.execute(
                "UPDATE posts SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                (post.title, post.content, now, post_id)
            )

        logger.info(f"Post updated: id={post_id}")
        return self.get_by_id(post_id)

    def delete(self, post_id: int, caller_id: int) -> int:
        """Delete a post owned by the caller.

        A post that does not exist and a post owned by someone else produce
        the same error.

        Args:
            post_id: ID of the post
            caller_id: ID of the authenticated user

        Returns:
            Number of rows deleted (1)

        Raises:
            ResourceNotFound: If no post matches both post_id and caller_id
        """
        with translate_errors("Post"):
            cursor = self._conn.execute(
                "DELETE FROM posts WHERE id = ? AND author_id = ?",
                (post_id, caller_id)
            )

        if cursor.rowcount == 0:
            raise ResourceNotFound("Post not found", {"post_id": post_id})

        logger.info(f"Post deleted: id={post_id} by user {caller_id}")
        return cursor.rowcount
