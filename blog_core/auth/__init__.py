"""Authentication module for blog-core.

This module provides:
- Password hashing and verification (bcrypt)
- Bearer token verification (PyJWT); tokens are minted by an external issuer
- The per-request auth gate and the @auth_required decorator
"""

from . import gate, password, token

__all__ = ["gate", "password", "token"]
