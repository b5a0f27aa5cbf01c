"""Post record schema."""

from datetime import datetime

from pydantic import BaseModel, Field

from .user import User


class Post(BaseModel):
    """A blog post owned by exactly one user.

    `author` is filled in from the users table at read time and is never
    written back to storage.
    """

    id: int = Field(default=0, description="Storage-assigned ID (0 = unassigned)")
    title: str = ""
    content: str = ""
    author: User | None = None
    author_id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
