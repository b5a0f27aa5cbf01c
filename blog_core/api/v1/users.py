"""User endpoints for blog-core API.

- POST   /api/v1/users          - Register (public)
- GET    /api/v1/users          - List users
- GET    /api/v1/users/{id}     - Get single user
- PUT    /api/v1/users/{id}     - Update own profile
- DELETE /api/v1/users/{id}     - Delete own account

Passwords are accepted on input and never returned.
"""

from contextlib import closing

from flask import Blueprint, jsonify, request

from ...auth.decorators import auth_required, owner_only
from ...config import settings
from ...db import get_core
from ...exceptions import ResourceNotFound
from ...sanitize import RecordSanitizer
from ...schemas import User, UserPatch
from ...validation import FieldValidator, ValidationMode
from ..validation import validate_request

users_bp = Blueprint("users", __name__, url_prefix="/users")

sanitizer = RecordSanitizer()
validator = FieldValidator()


def list_limit() -> int:
    """`limit` query parameter, capped at settings.default_list_limit."""
    limit = request.args.get("limit", settings.default_list_limit, type=int)
    return max(1, min(limit, settings.default_list_limit))


@users_bp.post("")
@validate_request
def create_user(data: User):
    """
    Register a new user.

    Request Body (User):
        - nickname: str (required, unique)
        - email: str (required, unique, valid address)
        - password: str (required)

    Returns:
        201: User
        400: Validation error
        422: Nickname or email already taken
    """
    sanitizer.sanitize_user_fields(data)
    validator.validate_user(data, ValidationMode.CREATE)

    with get_core(atomic=True) as core:
        user = core.users.create(data)

    return jsonify(user.model_dump(mode="json")), 201


@users_bp.get("")
def list_users():
    """
    List users in registration order.

    Query Parameters:
        - limit: int - Maximum results to return (default and cap: 100)
    """
    with closing(get_core()) as core:
        users = core.users.list(limit=list_limit())

    return jsonify([user.model_dump(mode="json") for user in users])


@users_bp.get("/<int:user_id>")
def get_user(user_id: int):
    """
    Returns:
        200: User
        404: User not found
    """
    with closing(get_core()) as core:
        user = core.users.get_by_id(user_id)

    return jsonify(user.model_dump(mode="json"))


@users_bp.put("/<int:user_id>")
@auth_required
@owner_only
@validate_request
def update_user(user_id: int, data: User):
    """
    Update the caller's own profile.

    Request Body (User): nickname, email and password are all required.

    Returns:
        200: Updated User
        400: Validation error
        401: Missing/invalid token or not the caller's own account
        404: User not found
        422: Nickname or email already taken
    """
    sanitizer.sanitize_user_fields(data)
    validator.validate_user(data, ValidationMode.UPDATE)

    patch = UserPatch(nickname=data.nickname, email=data.email, password=data.password)
    with get_core(atomic=True) as core:
        user = core.users.update(user_id, patch)

    return jsonify(user.model_dump(mode="json"))


@users_bp.delete("/<int:user_id>")
@auth_required
@owner_only
def delete_user(user_id: int):
    """
    Delete the caller's own account (and their posts).

    Returns:
        204: No content
        401: Missing/invalid token or not the caller's own account
        404: User not found
    """
    with get_core(atomic=True) as core:
        if core.users.delete(user_id) == 0:
            raise ResourceNotFound(f"User '{user_id}' not found", {"user_id": user_id})

    return "", 204
