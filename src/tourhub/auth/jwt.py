"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
Tokens are short-lived (60 min by default) and never stored server-side;
the claims are whatever identity payload the client submitted (at least
an email) plus iat/exp.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from tourhub.config import settings


class TokenError(Exception):
    """Raised when token creation/verification fails."""


def create_access_token(
    claims: dict[str, Any],
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a JWT access token carrying the given identity claims."""
    if not claims.get("email"):
        raise TokenError("Identity payload must include an email")
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(
            minutes=expires_minutes or settings.access_token_expire_minutes
        ),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
    if not payload.get("email"):
        raise TokenError("Token has no email claim")
    return payload
