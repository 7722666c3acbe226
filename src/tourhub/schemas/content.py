"""Pydantic schemas for stories, community posts, and blog posts."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field
from pydantic.alias_generators import to_camel

from tourhub.schemas.common import CamelModel


class StoryCreate(CamelModel):
    email: EmailStr
    title: str = Field(..., min_length=1, max_length=200)
    excerpt: str = Field("", max_length=500)
    content: str = Field(..., min_length=1)


class StoryRead(CamelModel):
    id: str
    email: str
    title: str
    excerpt: Optional[str] = None
    content: str
    poster_name: Optional[str] = None
    poster_photo_url: Optional[str] = Field(None, alias="posterPhotoURL")
    created_at: Optional[datetime] = None


class ContentPostRead(CamelModel):
    """Community and blog posts are seeded content; unknown fields pass through."""
    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "extra": "allow"}
