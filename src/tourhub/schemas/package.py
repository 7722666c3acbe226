"""Pydantic schemas for tour packages.

Package creation is multipart (form fields + image files), so there is
no body model for it — the route declares Form/File parameters and the
service validates tourPlan and the images.
"""

import base64
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field

from tourhub.schemas.common import CamelModel


def _encode_images(value: Any) -> list:
    """Stored images are binary; JSON gets base64 strings."""
    return [
        base64.b64encode(bytes(v)).decode("ascii")
        if isinstance(v, (bytes, bytearray, memoryview))
        else v
        for v in (value or [])
    ]


Base64Images = Annotated[list[str], BeforeValidator(_encode_images)]


class PackageRead(CamelModel):
    id: str
    package_name: str
    images: Base64Images = []
    about: Optional[str] = None
    tour_plan: list[dict[str, Any]] = []
    guide: Optional[str] = None
    price: float
    type: Optional[str] = None
    created_at: Optional[datetime] = None


class PackageIdsBody(CamelModel):
    package_ids: list[str] = Field(..., min_length=1)
