"""Bearer token verification.

Tokens are issued by an external service that shares the signing secret
(settings.jwt_secret_key). This module only extracts and validates them;
it never mints tokens.
"""

import jwt
from pydantic import BaseModel

from ..config import settings


class TokenPayload(BaseModel):
    """Claims carried by a valid access token."""

    sub: str
    exp: int
    iat: int | None = None

    @property
    def user_id(self) -> int:
        """Numeric ID of the authenticated user."""
        return int(self.sub)


def extract_bearer_token(auth_header: str | None) -> str | None:
    """
    Pull the token out of an Authorization header value.

    Args:
        auth_header: Raw header value, e.g. "Bearer eyJhbGciOi..."

    Returns:
        The token string, or None if the header is missing or not a
        well-formed bearer credential.
    """
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None

    return parts[1]


def verify_access_token(token: str) -> TokenPayload:
    """
    Verify signature and expiry of an access token and decode its claims.

    Args:
        token: Encoded JWT string

    Returns:
        TokenPayload with the decoded claims

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed, has a bad signature,
            lacks required claims, or its subject is not a user ID
    """
    claims = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )

    sub = str(claims["sub"])
    # isdigit() alone also accepts characters like "²" that int() refuses
    if not (sub.isascii() and sub.isdigit()) or int(sub) < 1:
        raise jwt.InvalidTokenError("Subject is not a user ID")

    # PyJWT accepts fractional NumericDate values; timestamps are whole seconds here
    iat = claims.get("iat")
    try:
        return TokenPayload(
            sub=sub,
            exp=int(claims["exp"]),
            iat=int(iat) if iat is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise jwt.InvalidTokenError(f"Malformed claims: {type(e).__name__}") from None
