"""Pydantic record schemas for users and posts."""

from .post import Post
from .user import User, UserPatch

__all__ = [
    "User",
    "UserPatch",
    "Post",
]
