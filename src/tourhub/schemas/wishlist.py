"""Pydantic schemas for wishlist entries."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from tourhub.schemas.common import CamelModel


class WishlistItemBody(CamelModel):
    email: EmailStr
    package_id: str = Field(..., min_length=1)


class WishlistItemRead(CamelModel):
    id: str
    email: str
    package_id: str
    created_at: Optional[datetime] = None
