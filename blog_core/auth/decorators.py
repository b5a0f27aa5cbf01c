"""Authentication decorators for protected endpoints.

- @auth_required - Requires a valid bearer token
- @owner_only - Requires the caller to be the user named in the URL

Both decorators can be composed; @auth_required must run first.
"""

import logging
from functools import wraps

from flask import current_app, g

from ..exceptions import AuthenticationError
from .gate import UNAUTHORIZED_MESSAGE

logger = logging.getLogger(__name__)


def auth_required(f):
    """
    Decorator to require a valid bearer token for endpoint access.

    Delegates to the AuthGate registered on the current app. On success the
    caller ID is available as flask.g.user_id.

    Raises:
        AuthenticationError: If the gate rejects the request

    Example:
    ```python
    @auth_required
    def protected_endpoint():
        caller_id = g.user_id
        ...
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        current_app.extensions["auth_gate"].enforce()
        return f(*args, **kwargs)

    return wrapper


def owner_only(f):
    """
    Decorator restricting a /users/<user_id> endpoint to that user.

    Raises:
        AuthenticationError: If g.user_id differs from the user_id URL argument
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if g.get("user_id") != kwargs.get("user_id"):
            logger.warning(
                f"User {g.get('user_id')} attempted to modify user {kwargs.get('user_id')}"
            )
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        return f(*args, **kwargs)

    return wrapper
