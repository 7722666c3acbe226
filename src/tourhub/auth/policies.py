"""Authorization policies — pure decisions, no I/O.

Learn: Policies take data that has already been loaded (the verified
identity, the caller's User document, the target resource) and either
return or raise ForbiddenError. Keeping them free of database access
makes each rule testable on its own; the dependencies in
auth/dependencies.py do the lookups and then call these.
"""

from typing import Optional

from tourhub.errors import ForbiddenError

ADMIN_ROLE = "admin"


def is_admin(user: Optional[dict]) -> bool:
    """True only for an existing User whose role is admin.

    A missing User record is "not admin" — the admin check fails closed
    rather than surfacing a lookup error.
    """
    return user is not None and user.get("role") == ADMIN_ROLE


def ensure_admin(user: Optional[dict]) -> None:
    if not is_admin(user):
        raise ForbiddenError("Admin access required")


def ensure_self(identity_email: str, target_email: Optional[str]) -> None:
    """The identity may only act on records that carry its own email."""
    if not target_email or target_email != identity_email:
        raise ForbiddenError(
            "Forbidden access",
            context={"identity": identity_email, "target": target_email},
        )
