"""Wishlist routes — every one is self-scoped."""

from fastapi import APIRouter, Depends

from tourhub.auth.dependencies import CurrentIdentity, get_current_identity
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.common import MessageResponse
from tourhub.schemas.wishlist import WishlistItemBody, WishlistItemRead
from tourhub.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist")


def _svc(db: Database = Depends(get_db)) -> WishlistService:
    return WishlistService(db)


@router.post("", response_model=WishlistItemRead, status_code=201)
async def add_to_wishlist(
    body: WishlistItemBody,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: WishlistService = Depends(_svc),
):
    identity.ensure_self(body.email)
    return await svc.add(body.email, body.package_id)


@router.delete("", response_model=MessageResponse)
async def remove_from_wishlist(
    body: WishlistItemBody,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: WishlistService = Depends(_svc),
):
    identity.ensure_self(body.email)
    await svc.remove(body.email, body.package_id)
    return MessageResponse(message="Package removed from wishlist")


@router.get("/{email}", response_model=list[WishlistItemRead])
async def get_wishlist(
    email: str,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: WishlistService = Depends(_svc),
):
    identity.ensure_self(email)
    return await svc.list_for(email)
