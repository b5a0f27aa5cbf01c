"""SQL fragment builders for parameterized queries.

Column names always come from code, never from request data; values are
always bound as parameters.
"""

from typing import Any


def build_update_clause(
    data: dict[str, Any],
    exclude: set[str] | None = None
) -> tuple[str, list[Any]]:
    """Build the SET part of an UPDATE statement.

    Args:
        data: Column name -> new value. None values are skipped.
        exclude: Columns that must never be updated (e.g. {"id"})

    Returns:
        (clause, params). Clause is "" when there is nothing to update.
    """
    exclude = exclude or set()
    fragments = []
    params = []

    for key, value in data.items():
        if key in exclude or value is None:
            continue
        fragments.append(f"{key} = ?")
        params.append(value)

    return ", ".join(fragments), params
