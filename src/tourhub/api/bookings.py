"""Booking routes.

Learn: Ownership is checked against different fields per operation:
- tourists list, create, and cancel their own bookings (booking.email)
- guides list and decide the bookings assigned to them (booking.guide)
For id-addressed routes the booking is loaded first so the policy has
something to compare against.
"""

from fastapi import APIRouter, Depends, Query

from tourhub.auth.dependencies import CurrentIdentity, get_current_identity
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate
from tourhub.schemas.common import MessageResponse
from tourhub.services.booking_service import BookingService

router = APIRouter()


def _svc(db: Database = Depends(get_db)) -> BookingService:
    return BookingService(db)


@router.get("/bookings", response_model=list[BookingRead])
async def list_bookings(
    email: str = Query(..., min_length=1),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: BookingService = Depends(_svc),
):
    identity.ensure_self(email)
    return await svc.list_for_tourist(email)


@router.post("/bookings", response_model=BookingRead, status_code=201)
async def create_booking(
    body: BookingCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: BookingService = Depends(_svc),
):
    identity.ensure_self(body.email)
    return await svc.create_booking(body)


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
async def cancel_booking(
    booking_id: str,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: BookingService = Depends(_svc),
):
    booking = await svc.get_booking(booking_id)
    identity.ensure_self(booking["email"])
    await svc.cancel_booking(booking_id)
    return MessageResponse(message="Booking cancelled successfully")


@router.get("/assigned-tours", response_model=list[BookingRead])
async def list_assigned_tours(
    guide: str = Query(..., min_length=1, description="Guide email"),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: BookingService = Depends(_svc),
):
    identity.ensure_self(guide)
    return await svc.list_for_guide(guide)


@router.patch("/bookings/{booking_id}/status", response_model=BookingRead)
async def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: BookingService = Depends(_svc),
):
    """Assigned guide accepts or rejects a booking."""
    booking = await svc.get_booking(booking_id)
    identity.ensure_self(booking.get("guide"))
    return await svc.update_status(booking_id, body.status, expected_guide=identity.email)
