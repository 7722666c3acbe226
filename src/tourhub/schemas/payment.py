"""Pydantic schemas for payment intents and recorded payments.

Prices are decimals on the way in so the minor-unit conversion is exact;
stored and returned values are plain floats.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field

from tourhub.schemas.common import CamelModel


class PaymentIntentCreate(CamelModel):
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class PaymentIntentRead(CamelModel):
    client_secret: str


class PaymentCreate(CamelModel):
    """Client-submitted confirmation of a settled payment."""
    email: EmailStr
    booking_id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    package_name: Optional[str] = None
    date: Optional[datetime] = None


class PaymentRead(CamelModel):
    id: str
    email: str
    booking_id: str
    transaction_id: str
    price: float
    package_name: Optional[str] = None
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
