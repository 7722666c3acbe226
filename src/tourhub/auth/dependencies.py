"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. Dependencies are
resolved before the handler body runs, so a request that fails here
never reaches a service call — no reads, no writes.

- get_current_identity: Bearer JWT → CurrentIdentity, or 401
- require_admin: CurrentIdentity whose User has role "admin", or 403
"""

from typing import Any, Optional

import structlog
from fastapi import Depends, Header

from tourhub.auth.jwt import TokenError, verify_token
from tourhub.auth.policies import ensure_admin, ensure_self
from tourhub.db.mongo import Database, get_db, store_errors
from tourhub.errors import UnauthorizedError

logger = structlog.get_logger()


class CurrentIdentity:
    """The verified caller, decoded from the bearer token.

    Learn: The email claim is the identity. Everything else in `claims`
    (name, photoURL, iat, exp) is informational.
    """

    def __init__(self, email: str, claims: Optional[dict[str, Any]] = None):
        self.email = email
        self.claims = claims or {}

    def ensure_self(self, target_email: Optional[str]) -> None:
        """Ownership policy: raise ForbiddenError unless target is this identity."""
        ensure_self(self.email, target_email)

    def __repr__(self) -> str:
        return f"CurrentIdentity(email={self.email!r})"


async def get_current_identity(
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if missing or invalid)."""
    if not authorization:
        raise UnauthorizedError("Unauthorized access")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Unauthorized access")

    try:
        payload = verify_token(token.strip())
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise UnauthorizedError("Unauthorized access", context={"reason": str(e)})

    return CurrentIdentity(email=payload["email"], claims=payload)


async def require_admin(
    identity: CurrentIdentity = Depends(get_current_identity),
    db: Database = Depends(get_db),
) -> CurrentIdentity:
    """Role policy — must run after the verifier (needs the decoded email)."""
    with store_errors("checking admin access"):
        user = await db.users.find_one({"email": identity.email})
    ensure_admin(user)
    return identity
