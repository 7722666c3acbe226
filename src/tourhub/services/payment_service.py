"""Payment service — payment intents and recorded payments.

Learn: The provider only creates the intent. Settlement happens in the
browser, after which the client posts a confirmation record here. We
trust that record (no server-side settlement check) but do verify the
booking exists, belongs to the payer, and is still payable ("In Review"
or "Accepted") before marking it Paid.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import structlog
from pymongo.errors import DuplicateKeyError

from tourhub.config import settings
from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import ConflictError, ForbiddenError, NotFoundError
from tourhub.schemas.booking import PAYABLE_STATUSES, STATUS_PAID
from tourhub.schemas.payment import PaymentCreate
from tourhub.services.payment_gateway import StripeGateway

logger = structlog.get_logger()


def to_minor_units(price: Decimal) -> int:
    """19.99 → 1999. Decimal arithmetic, half-up to the nearest cent."""
    return int((price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    def __init__(self, db: Database, gateway: Optional[StripeGateway] = None):
        self.db = db
        self.gateway = gateway

    async def create_intent(self, price: Decimal, currency: Optional[str] = None) -> str:
        amount = to_minor_units(price)
        currency = (currency or settings.payment_currency).lower()
        client_secret = await self.gateway.create_payment_intent(amount, currency)
        logger.info("payments.intent_created", amount=amount, currency=currency)
        return client_secret

    async def record_payment(self, body: PaymentCreate) -> dict:
        """Store the payment, then mark its booking Paid (two separate writes)."""
        booking_oid = parse_object_id(body.booking_id, "booking")
        payment = {
            "email": body.email,
            "bookingId": str(booking_oid),
            "transactionId": body.transaction_id,
            "price": float(body.price),
            "packageName": body.package_name,
            "date": body.date or datetime.now(timezone.utc),
            "createdAt": datetime.now(timezone.utc),
        }
        with store_errors("saving payment information"):
            booking = await self.db.bookings.find_one({"_id": booking_oid})
            if not booking:
                raise NotFoundError("Booking not found")
            if booking.get("email") != body.email:
                raise ForbiddenError("Booking belongs to another user")
            if booking.get("status") not in PAYABLE_STATUSES:
                raise ConflictError(
                    f"Booking is {booking.get('status')} and cannot be paid",
                    context={"booking_id": body.booking_id},
                )

            try:
                await self.db.payments.insert_one(payment)
            except DuplicateKeyError:
                raise ConflictError("Payment already recorded")

            await self.db.bookings.update_one(
                {"_id": booking_oid, "status": {"$in": list(PAYABLE_STATUSES)}},
                {"$set": {"status": STATUS_PAID}},
            )

        logger.info(
            "payments.recorded",
            payment_id=str(payment["_id"]),
            booking_id=body.booking_id,
        )
        return to_document(payment)

    async def list_for(self, email: str) -> list[dict]:
        with store_errors("fetching payments"):
            payments = await self.db.payments.find({"email": email}).to_list(None)
        return [to_document(p) for p in payments]
