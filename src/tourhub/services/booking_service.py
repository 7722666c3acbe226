"""Booking service — tourists book packages, guides accept or reject.

Learn: Booking creation reads the Package and the User, then writes the
Booking. These are three separate single-document operations with no
transaction around them: a package deleted between the read and the
write is not detected. The booking carries copies of the package name
and price taken at read time.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from pymongo import ReturnDocument

from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import BadRequestError, NotFoundError
from tourhub.schemas.booking import STATUS_IN_REVIEW, BookingCreate

logger = structlog.get_logger()


class BookingService:
    """Business logic for bookings."""

    def __init__(self, db: Database):
        self.db = db

    async def create_booking(self, body: BookingCreate) -> dict:
        package_oid = parse_object_id(body.package_id, "package")
        with store_errors("creating booking"):
            package = await self.db.packages.find_one({"_id": package_oid})
            if not package:
                raise NotFoundError("Package not found")
            # The accepting guide is always the package's
            if body.guide is not None and body.guide != package.get("guide"):
                raise BadRequestError(
                    "Guide does not match the package",
                    context={"guide": body.guide, "package_guide": package.get("guide")},
                )

            tourist = await self.db.users.find_one({"email": body.email})
            if not tourist:
                raise NotFoundError("Tourist not found")

            booking = {
                "packageId": str(package_oid),
                "packageName": package.get("packageName"),
                "guide": package.get("guide"),
                "startDate": body.start_date,
                "price": package.get("price"),
                "status": STATUS_IN_REVIEW,
                "email": body.email,
                "touristName": tourist.get("name"),
                "createdAt": datetime.now(timezone.utc),
            }
            await self.db.bookings.insert_one(booking)

        logger.info(
            "booking.created",
            booking_id=str(booking["_id"]),
            package_id=body.package_id,
            email=body.email,
        )
        return to_document(booking)

    async def get_booking(self, booking_id: str) -> dict:
        oid = parse_object_id(booking_id, "booking")
        with store_errors("fetching booking"):
            booking = await self.db.bookings.find_one({"_id": oid})
        if not booking:
            raise NotFoundError("Booking not found")
        return to_document(booking)

    async def list_for_tourist(self, email: str) -> list[dict]:
        with store_errors("fetching bookings"):
            bookings = await self.db.bookings.find({"email": email}).to_list(None)
        return [to_document(b) for b in bookings]

    async def list_for_guide(self, guide: str) -> list[dict]:
        with store_errors("fetching assigned tours"):
            bookings = await self.db.bookings.find({"guide": guide}).to_list(None)
        return [to_document(b) for b in bookings]

    async def cancel_booking(self, booking_id: str) -> None:
        oid = parse_object_id(booking_id, "booking")
        with store_errors("cancelling booking"):
            result = await self.db.bookings.delete_one({"_id": oid})
        if result.deleted_count != 1:
            raise NotFoundError("Booking not found")
        logger.info("booking.cancelled", booking_id=booking_id)

    async def update_status(
        self, booking_id: str, status: str, expected_guide: Optional[str] = None
    ) -> dict:
        """Set the status; `expected_guide` pins the write to that guide's booking."""
        oid = parse_object_id(booking_id, "booking")
        query: dict = {"_id": oid}
        if expected_guide is not None:
            query["guide"] = expected_guide
        with store_errors("updating booking status"):
            booking = await self.db.bookings.find_one_and_update(
                query,
                {"$set": {"status": status}},
                return_document=ReturnDocument.AFTER,
            )
        if not booking:
            raise NotFoundError("Booking not found")
        logger.info("booking.status_changed", booking_id=booking_id, status=status)
        return to_document(booking)
