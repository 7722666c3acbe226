"""Pydantic schemas for users, guide profiles, reviews, and role requests.

Role elevation:
- RoleRequestCreate: a tourist asks to become a tour guide
- RoleDecisionBody: an admin approves or rejects the pending request
"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import EmailStr, Field

from tourhub.schemas.common import CamelModel

Role = Literal["tourist", "tourguide", "admin"]
RoleDecision = Literal["approved", "rejected"]

DEFAULT_ROLE = "tourist"
GUIDE_ROLE = "tourguide"


# ─── Registration ───────────────────────────────────────

class UserRegister(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    photo_url: Optional[str] = Field(None, alias="photoURL")
    # Elevated roles are only reachable through the request/decision flow
    role: Literal["tourist"] = DEFAULT_ROLE


class UserExists(CamelModel):
    exists: bool
    role: Optional[str] = None


# ─── Reviews ────────────────────────────────────────────

class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=2000)
    email: Optional[EmailStr] = Field(
        None, description="Reviewer email; must match the token if given"
    )


class Review(CamelModel):
    rating: int
    comment: str
    email: str
    date: datetime


# ─── Profiles ───────────────────────────────────────────

class GuideProfileUpdate(CamelModel):
    email: EmailStr
    bio: Optional[str] = None
    experience: Optional[str] = None
    contact: Optional[str] = None
    education: Optional[str] = None
    skills: Union[list[str], str, None] = None


class UserRead(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")
    role: str = DEFAULT_ROLE
    request_role: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[str] = None
    contact: Optional[str] = None
    education: Optional[str] = None
    skills: Union[list[str], str, None] = None
    reviews: list[Review] = []
    created_at: Optional[datetime] = None


# ─── Role elevation ─────────────────────────────────────

class RoleRequestCreate(CamelModel):
    email: EmailStr


class RoleDecisionBody(CamelModel):
    decision: RoleDecision
