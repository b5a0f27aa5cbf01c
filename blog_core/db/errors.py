"""Translation of sqlite3 errors into blog-core exceptions."""

import logging
import sqlite3
from contextlib import contextmanager

from ..exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def unique_violation_field(error: sqlite3.IntegrityError) -> str | None:
    """Column named in a UNIQUE failure ("UNIQUE constraint failed: users.email")."""
    message = str(error)
    if not message.startswith("UNIQUE constraint failed"):
        return None
    return message.rsplit(".", 1)[-1]


def is_foreign_key_violation(error: sqlite3.IntegrityError) -> bool:
    return str(error).startswith("FOREIGN KEY constraint failed")


@contextmanager
def translate_errors(entity_type: str):
    """
    Map storage failures raised inside the block.

    - UNIQUE violations become ConflictError naming the column
    - Any other sqlite3.Error becomes an opaque DatabaseError

    Args:
        entity_type: Human-readable type name for error messages ("User", "Post")
    """
    try:
        yield
    except sqlite3.IntegrityError as e:
        field = unique_violation_field(e)
        if field is not None:
            raise ConflictError(
                f"{entity_type} with this {field} already exists",
                {"field": field}
            ) from e
        logger.error(f"{entity_type} integrity error: {e}")
        raise DatabaseError(f"Failed to store {entity_type.lower()}") from e
    except sqlite3.Error as e:
        logger.error(f"{entity_type} storage error: {e}")
        raise DatabaseError(f"Failed to access {entity_type.lower()} storage") from e
