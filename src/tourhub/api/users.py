"""User, profile, guide, and role-request routes.

Learn: Guards are plain dependencies on each route:
- open routes take no identity
- self-scoped routes take get_current_identity and call
  identity.ensure_self(<target email>) before touching the service
- admin routes take require_admin, which runs the verifier first
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tourhub.auth.dependencies import (
    CurrentIdentity,
    get_current_identity,
    require_admin,
)
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.common import MessageResponse
from tourhub.schemas.user import (
    GuideProfileUpdate,
    ReviewCreate,
    Role,
    RoleDecisionBody,
    RoleRequestCreate,
    UserExists,
    UserRead,
    UserRegister,
)
from tourhub.services.user_service import UserService

router = APIRouter()


def _svc(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── Registration ───────────────────────────────────────

@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: UserRegister, svc: UserService = Depends(_svc)):
    """Register a user. Every new account starts as a tourist."""
    return await svc.register(body)


@router.get("/users/exists", response_model=UserExists)
async def user_exists(
    email: str = Query(..., min_length=1),
    svc: UserService = Depends(_svc),
):
    user = await svc.exists(email)
    if not user:
        return UserExists(exists=False)
    return UserExists(exists=True, role=user.get("role"))


# ─── Admin ──────────────────────────────────────────────

@router.get("/users", response_model=list[UserRead])
async def list_users(
    search: Optional[str] = Query(None, description="Substring of name or email"),
    role: Optional[Role] = Query(None),
    _: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    return await svc.list_users(search=search, role=role)


@router.get("/users/requests", response_model=list[UserRead])
async def list_role_requests(
    _: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    """Users with a pending role request."""
    return await svc.list_pending_requests()


@router.patch("/users/{user_id}/request", response_model=UserRead)
async def decide_role_request(
    user_id: str,
    body: RoleDecisionBody,
    _: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    """Approve or reject a pending role request."""
    return await svc.decide_role_request(user_id, body.decision)


# ─── Profile (self) ─────────────────────────────────────

@router.get("/profile", response_model=UserRead)
async def get_profile(
    email: str = Query(..., min_length=1),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    identity.ensure_self(email)
    return await svc.get_by_email(email)


@router.post("/profile", response_model=UserRead)
async def update_profile(
    body: GuideProfileUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    """Submit guide info (bio, experience, contact, education, skills)."""
    identity.ensure_self(body.email)
    return await svc.update_profile(body)


@router.post("/request-tour-guide", response_model=MessageResponse)
async def request_tour_guide(
    body: RoleRequestCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    identity.ensure_self(body.email)
    await svc.request_role(body.email)
    return MessageResponse(message="Request sent successfully")


# ─── Guides ─────────────────────────────────────────────

@router.get("/guides", response_model=list[UserRead])
async def list_guides(svc: UserService = Depends(_svc)):
    return await svc.list_guides()


@router.get("/guides/{guide_id}", response_model=UserRead)
async def get_guide(guide_id: str, svc: UserService = Depends(_svc)):
    return await svc.get_guide(guide_id)


@router.post("/guides/{guide_id}/review", response_model=MessageResponse)
async def add_review(
    guide_id: str,
    body: ReviewCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    """Reviews are always attributed to the token's email."""
    if body.email is not None:
        identity.ensure_self(body.email)
    await svc.add_review(guide_id, identity.email, body)
    return MessageResponse(message="Review added successfully")
