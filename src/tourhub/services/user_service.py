"""User service — registration, profiles, guides, reviews, role elevation.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Services raise
tourhub.errors exceptions; they never build HTTP responses.

Role elevation is a small state machine on the User document:

    none ──request──▶ requested ──approved──▶ role := requestRole
                          │
                          └─────rejected────▶ role unchanged

Both decisions clear requestRole. Re-requesting while a request is
pending just overwrites it (there is no queue).
"""

import re
from datetime import datetime, timezone
from typing import Optional

import structlog
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from tourhub.config import settings
from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import BadRequestError, ConflictError, NotFoundError
from tourhub.schemas.user import (
    DEFAULT_ROLE,
    GUIDE_ROLE,
    GuideProfileUpdate,
    ReviewCreate,
    UserRegister,
)

logger = structlog.get_logger()

PROFILE_FIELDS = ("bio", "experience", "contact", "education", "skills")


class UserService:
    """Business logic for users and tour guides."""

    def __init__(self, db: Database):
        self.db = db

    # ─── Registration ───────────────────────────────────

    async def register(self, body: UserRegister) -> dict:
        """Create a user; duplicate email → ConflictError("User already exists").

        Emails listed in settings.admin_emails are registered as admins.
        """
        role = "admin" if body.email in settings.admin_emails else DEFAULT_ROLE
        doc = {
            "email": body.email,
            "name": body.name,
            "photoURL": body.photo_url,
            "role": role,
            "requestRole": None,
            "reviews": [],
            "createdAt": datetime.now(timezone.utc),
        }
        with store_errors("registering user"):
            if await self.db.users.find_one({"email": body.email}):
                raise ConflictError("User already exists")
            try:
                await self.db.users.insert_one(doc)
            except DuplicateKeyError:
                # Lost a race with a concurrent registration
                raise ConflictError("User already exists")

        logger.info("user.registered", email=body.email, role=role)
        return to_document(doc)

    async def exists(self, email: str) -> Optional[dict]:
        with store_errors("checking user existence"):
            return to_document(await self.db.users.find_one({"email": email}))

    # ─── Lookups ────────────────────────────────────────

    async def get_by_email(self, email: str) -> dict:
        with store_errors("fetching user"):
            user = await self.db.users.find_one({"email": email})
        if not user:
            raise NotFoundError("User not found")
        return to_document(user)

    async def list_users(
        self, search: Optional[str] = None, role: Optional[str] = None
    ) -> list[dict]:
        """All users, optionally filtered by name/email substring and role."""
        query: dict = {}
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}},
            ]
        if role:
            query["role"] = role
        with store_errors("listing users"):
            users = await self.db.users.find(query).to_list(None)
        return [to_document(u) for u in users]

    async def list_pending_requests(self) -> list[dict]:
        with store_errors("listing role requests"):
            users = await self.db.users.find(
                {"requestRole": {"$ne": None}}
            ).to_list(None)
        return [to_document(u) for u in users]

    # ─── Guide profiles ─────────────────────────────────

    async def update_profile(self, body: GuideProfileUpdate) -> dict:
        """Set the guide info fields that were sent; others are left alone."""
        changes = {
            field: getattr(body, field)
            for field in PROFILE_FIELDS
            if field in body.model_fields_set
        }
        if not changes:
            raise BadRequestError("No profile fields to update")
        with store_errors("submitting guide info"):
            user = await self.db.users.find_one_and_update(
                {"email": body.email},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if not user:
            raise NotFoundError("User not found")
        logger.info("user.profile_updated", email=body.email, fields=sorted(changes))
        return to_document(user)

    async def list_guides(self) -> list[dict]:
        with store_errors("listing guides"):
            guides = await self.db.users.find({"role": GUIDE_ROLE}).to_list(None)
        return [to_document(g) for g in guides]

    async def get_guide(self, guide_id: str) -> dict:
        oid = parse_object_id(guide_id, "guide")
        with store_errors("fetching guide"):
            guide = await self.db.users.find_one({"_id": oid, "role": GUIDE_ROLE})
        if not guide:
            raise NotFoundError("Guide not found")
        return to_document(guide)

    async def add_review(
        self, guide_id: str, reviewer_email: str, body: ReviewCreate
    ) -> dict:
        """Append a review to a guide's profile; returns the stored review."""
        oid = parse_object_id(guide_id, "guide")
        review = {
            "rating": body.rating,
            "comment": body.comment,
            "email": reviewer_email,
            "date": datetime.now(timezone.utc),
        }
        with store_errors("adding review"):
            result = await self.db.users.update_one(
                {"_id": oid, "role": GUIDE_ROLE},
                {"$push": {"reviews": review}},
            )
        if result.matched_count == 0:
            raise NotFoundError("Guide not found")
        logger.info("guide.reviewed", guide_id=guide_id, rating=body.rating)
        return review

    # ─── Role elevation ─────────────────────────────────

    async def request_role(self, email: str, requested: str = GUIDE_ROLE) -> dict:
        """none/requested → requested. Re-requesting overwrites."""
        with store_errors("sending request"):
            user = await self.db.users.find_one({"email": email})
            if not user:
                raise NotFoundError("User not found")
            if user.get("role") in (GUIDE_ROLE, "admin"):
                raise ConflictError(f"User is already a {user['role']}")
            user = await self.db.users.find_one_and_update(
                {"_id": user["_id"]},
                {"$set": {"requestRole": requested}},
                return_document=ReturnDocument.AFTER,
            )
        if not user:
            raise NotFoundError("User not found")
        logger.info("user.role_requested", email=email, requested=requested)
        return to_document(user)

    async def decide_role_request(self, user_id: str, decision: str) -> dict:
        """requested → approved (role := requestRole) or rejected.

        The update is conditioned on requestRole still holding the value we
        read, so two concurrent decisions can't both apply.
        """
        oid = parse_object_id(user_id, "user")
        with store_errors("processing request"):
            user = await self.db.users.find_one({"_id": oid})
            if not user:
                raise NotFoundError("User not found")
            pending = user.get("requestRole")
            if not pending:
                raise ConflictError("No pending role request")

            changes: dict = {"requestRole": None}
            if decision == "approved":
                changes["role"] = pending
            updated = await self.db.users.find_one_and_update(
                {"_id": oid, "requestRole": pending},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if not updated:
            raise ConflictError("Role request was already processed")

        logger.info(
            "user.role_decided",
            user_id=user_id,
            decision=decision,
            role=updated.get("role"),
        )
        return to_document(updated)
