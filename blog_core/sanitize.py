"""Normalization of untrusted record fields.

Runs before validation: trims surrounding whitespace and HTML-escapes free
text, drops client-supplied IDs, and stamps fresh timestamps. Sanitizing an
already clean record leaves its text fields unchanged.
"""

from datetime import datetime
from typing import Callable

from markupsafe import escape

from .schemas import Post, User
from .utils import isodatetime


def clean_text(value: str) -> str:
    """Trim leading/trailing whitespace and escape HTML special characters."""
    return str(escape(value.strip()))


class RecordSanitizer:
    """In-place sanitizer for User and Post records."""

    def __init__(self, clock: Callable[[], datetime] = isodatetime.utcnow):
        self._clock = clock

    def sanitize_user_fields(self, user: User) -> User:
        now = self._clock()
        user.id = 0
        user.nickname = clean_text(user.nickname)
        user.email = clean_text(user.email)
        user.created_at = now
        user.updated_at = now
        return user

    def sanitize_post_fields(self, post: Post) -> Post:
        """Same treatment for title/content.

        The embedded author is always dropped: it is resolved from storage by
        author_id, never taken from client input.
        """
        now = self._clock()
        post.id = 0
        post.title = clean_text(post.title)
        post.content = clean_text(post.content)
        post.author = None
        post.created_at = now
        post.updated_at = now
        return post
