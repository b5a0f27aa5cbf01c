"""Per-request authentication gate.

Each request gets a fresh GateDecision that starts UNCHECKED and moves exactly
once to AUTHORIZED or REJECTED. Nothing is retained between requests.

The gate does not know how tokens are signed. It extracts the bearer token and
hands it to an injected verifier (by default token.verify_access_token), which
raises jwt.InvalidTokenError on any failure.
"""

import logging
from enum import Enum
from typing import Callable

import jwt
from flask import Flask, g, request

from ..exceptions import AuthenticationError
from . import token
from .token import TokenPayload

logger = logging.getLogger(__name__)

Verifier = Callable[[str], TokenPayload]

UNAUTHORIZED_MESSAGE = "Unauthorized"


class GateState(str, Enum):
    UNCHECKED = "unchecked"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


class GateDecision:
    """Outcome of checking one request."""

    def __init__(self):
        self.state = GateState.UNCHECKED
        self.payload: TokenPayload | None = None
        self.reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.state is GateState.AUTHORIZED

    def authorize(self, payload: TokenPayload) -> None:
        self._transition(GateState.AUTHORIZED)
        self.payload = payload

    def reject(self, reason: str) -> None:
        self._transition(GateState.REJECTED)
        self.reason = reason

    def _transition(self, target: GateState) -> None:
        if self.state is not GateState.UNCHECKED:
            raise RuntimeError(
                f"Gate decision already {self.state.value}, cannot move to {target.value}"
            )
        self.state = target


class AuthGate:
    """Bearer-token gate in front of protected endpoints.

    Registered on the Flask app as app.extensions["auth_gate"] so that tests
    can install a gate with a different verifier.
    """

    def __init__(self, verifier: Verifier = token.verify_access_token):
        self._verifier = verifier

    def init_app(self, app: Flask) -> None:
        app.extensions["auth_gate"] = self

    def evaluate(self, auth_header: str | None) -> GateDecision:
        """
        Decide whether a request carrying this Authorization header may proceed.

        Args:
            auth_header: Raw Authorization header value (None if absent)

        Returns:
            GateDecision in AUTHORIZED or REJECTED state. The rejection
            reason is for server logs only.
        """
        decision = GateDecision()

        token_str = token.extract_bearer_token(auth_header)
        if token_str is None:
            decision.reject("missing or malformed Authorization header")
            return decision

        try:
            payload = self._verifier(token_str)
        except jwt.ExpiredSignatureError:
            decision.reject("token expired")
        except jwt.InvalidTokenError as e:
            decision.reject(f"invalid token: {e}")
        else:
            decision.authorize(payload)

        return decision

    def enforce(self) -> TokenPayload:
        """
        Check the current Flask request, stopping it if it is not authorized.

        On success stores the caller in flask.g:
        - g.user_id: Numeric user ID from the token subject

        Raises:
            AuthenticationError: With the generic "Unauthorized" message,
                whatever check failed
        """
        decision = self.evaluate(request.headers.get("Authorization"))
        if not decision.allowed:
            logger.warning(f"Rejected request to {request.path}: {decision.reason}")
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        g.user_id = decision.payload.user_id
        logger.debug(f"Authorized request for user {g.user_id}")
        return decision.payload
