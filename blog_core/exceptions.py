"""Custom exceptions for blog-core.

Every error carries a human-readable message and an optional details dict.
Messages and details must never contain a plaintext password or a stored
password hash.
"""


class BlogCoreError(Exception):
    """Base exception for all blog-core errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BlogCoreError):
    """Input failed a field rule. The caller must fix it and retry."""


class ConflictError(BlogCoreError):
    """A uniqueness constraint (nickname, email, title) was violated."""


class ResourceNotFound(BlogCoreError):
    """No such record, or the record exists but the caller does not own it."""


class AuthenticationError(BlogCoreError):
    """Request was rejected by the auth gate or an ownership check."""


class HashingError(BlogCoreError):
    """Password hashing failed."""


class VerificationError(BlogCoreError):
    """A stored password hash could not be checked (malformed hash)."""


class DatabaseError(BlogCoreError):
    """Lower-level persistence failure."""


NotFoundError = ResourceNotFound
StorageError = DatabaseError
