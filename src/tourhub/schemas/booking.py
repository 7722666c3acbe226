"""Pydantic schemas for bookings.

Status lifecycle: a booking starts "In Review"; the assigned guide marks
it "Accepted" or "Rejected"; recording a payment marks an "In Review" or
"Accepted" booking "Paid".
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from tourhub.schemas.common import CamelModel

BookingStatus = Literal["In Review", "Accepted", "Rejected", "Paid"]

STATUS_IN_REVIEW = "In Review"
STATUS_ACCEPTED = "Accepted"
STATUS_PAID = "Paid"

# A rejected or already paid booking takes no further payment
PAYABLE_STATUSES = (STATUS_IN_REVIEW, STATUS_ACCEPTED)


class BookingCreate(CamelModel):
    package_id: str = Field(..., min_length=1)
    email: EmailStr
    start_date: datetime
    guide: Optional[str] = Field(
        None, description="Guide email; must match the package's guide if sent"
    )


class BookingStatusUpdate(CamelModel):
    """Guide decision. "Paid" is only set by payment recording."""
    status: Literal["Accepted", "Rejected"]


class BookingRead(CamelModel):
    id: str
    package_id: str
    package_name: Optional[str] = None
    guide: Optional[str] = None
    start_date: datetime
    price: Optional[float] = None
    status: str
    email: str
    tourist_name: Optional[str] = None
    created_at: Optional[datetime] = None
