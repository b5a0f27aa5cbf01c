"""Post endpoints for blog-core API.

- POST   /api/v1/posts          - Create post as the caller
- GET    /api/v1/posts          - List posts with authors
- GET    /api/v1/posts/{id}     - Get single post with author
- PUT    /api/v1/posts/{id}     - Update own post (title/content)
- DELETE /api/v1/posts/{id}     - Delete own post

Ownership Notes:
- Update by a non-owner is 401 Unauthorized
- Delete by a non-owner is 404, same as a missing post
"""

import logging
from contextlib import closing

from flask import Blueprint, g, jsonify

from ...auth.decorators import auth_required
from ...auth.gate import UNAUTHORIZED_MESSAGE
from ...db import get_core
from ...exceptions import AuthenticationError
from ...sanitize import RecordSanitizer
from ...schemas import Post
from ...validation import FieldValidator
from ..validation import validate_request
from .users import list_limit

logger = logging.getLogger(__name__)

posts_bp = Blueprint("posts", __name__, url_prefix="/posts")

sanitizer = RecordSanitizer()
validator = FieldValidator()


@posts_bp.post("")
@auth_required
@validate_request
def create_post(data: Post):
    """
    Create a post authored by the caller.

    Request Body (Post):
        - title: str (required, unique)
        - content: str (required)
        - author_id: int (optional, must equal the caller if given)

    Returns:
        201: Post with author
        400: Validation error
        401: Missing/invalid token or author_id is someone else
        422: Title already taken
    """
    sanitizer.sanitize_post_fields(data)
    if data.author_id == 0:
        data.author_id = g.user_id
    elif data.author_id != g.user_id:
        logger.warning(f"User {g.user_id} attempted to post as user {data.author_id}")
        raise AuthenticationError(UNAUTHORIZED_MESSAGE)

    validator.validate_post(data)

    with get_core(atomic=True) as core:
        post = core.posts.create(data)

    return jsonify(post.model_dump(mode="json")), 201


@posts_bp.get("")
def list_posts():
    """
    List posts in creation order.

    Query Parameters:
        - limit: int - Maximum results to return (default and cap: 100)
    """
    with closing(get_core()) as core:
        posts = core.posts.list(limit=list_limit())

    return jsonify([post.model_dump(mode="json") for post in posts])


@posts_bp.get("/<int:post_id>")
def get_post(post_id: int):
    """
    Returns:
        200: Post with author
        404: Post not found
    """
    with closing(get_core()) as core:
        post = core.posts.get_by_id(post_id)

    return jsonify(post.model_dump(mode="json"))


@posts_bp.put("/<int:post_id>")
@auth_required
@validate_request
def update_post(post_id: int, data: Post):
    """
    Update title and content of the caller's own post.

    Returns:
        200: Updated Post with author
        400: Validation error
        401: Missing/invalid token or caller is not the author
        404: Post not found
        422: Title already taken
    """
    with get_core(atomic=True) as core:
        existing = core.posts.get_by_id(post_id)
        if existing.author_id != g.user_id:
            logger.warning(f"User {g.user_id} attempted to update post {post_id}")
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        sanitizer.sanitize_post_fields(data)
        data.author_id = existing.author_id
        validator.validate_post(data)

        post = core.posts.update(post_id, data)

    return jsonify(post.model_dump(mode="json"))


@posts_bp.delete("/<int:post_id>")
@auth_required
def delete_post(post_id: int):
    """
    Delete the caller's own post.

    Returns:
        204: No content
        401: Missing/invalid token
        404: Post not found or not owned by the caller
    """
    with get_core(atomic=True) as core:
        core.posts.delete(post_id, g.user_id)

    return "", 204
