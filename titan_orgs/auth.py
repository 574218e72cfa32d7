"""Identity collaborator — resolves the acting user from a bearer token.

Tokens are issued elsewhere; this module only validates the signature
and reads the numeric user id from the ``sub`` claim.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from titan_orgs.config import Settings
from titan_orgs.errors import AuthenticationError

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller of a request, as vouched for by the identity service."""

    user_id: int


def decode_user_id(token: str, settings: Settings) -> int:
    """Validate ``token`` and return its subject as a user id."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.info("token_rejected", error=str(exc))
        raise AuthenticationError("Invalid or expired token") from exc

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Token subject is not a user id") from exc


def get_authenticated_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """FastAPI dependency for routes that need ``auth_user``."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    user_id = decode_user_id(credentials.credentials, request.app.state.settings)
    return AuthenticatedUser(user_id=user_id)
