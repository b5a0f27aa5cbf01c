"""API v1 endpoints for blog-core.

This module provides the ApiV1 blueprint that aggregates all v1 resources:
- Users  (/api/v1/users)
- Posts  (/api/v1/posts)

Reads are public. Writes other than registration go through @auth_required,
which consults the AuthGate registered on the app.
"""

from flask import Blueprint

from . import posts, users

api_v1_bp = Blueprint("api_v1", __name__)

api_v1_bp.register_blueprint(users.users_bp)
api_v1_bp.register_blueprint(posts.posts_bp)

__all__ = ["api_v1_bp"]
