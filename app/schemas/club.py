from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SocialMedia(BaseModel):
    instagram: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    twitter: str | None = None


class Contact(BaseModel):
    email: str | None = None
    phone: str | None = None


class Location(BaseModel):
    address: str
    room: str | None = None
    building: str | None = None


class RawContent(BaseModel):
    html: str | None = None
    extracted_text: str | None = None


class ExtractedClub(BaseModel):
    """Best-effort fields pulled from one club page. Every field may be unset."""

    name: str = ""
    description: str = ""
    website_url: str | None = None
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    contact: Contact = Field(default_factory=Contact)
    location: Location | None = None
    image: str | None = None


class ClubUpsert(BaseModel):
    name: str
    description: str = ""
    source_url: str
    website_url: str | None = None
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    contact: Contact = Field(default_factory=Contact)
    location: Location | None = None
    image: str | None = None
    categories: list[str] = Field(min_length=1)
    raw_content: RawContent | None = None


class Club(ClubUpsert):
    id: str
    is_active: bool = True
    last_scraped_at: datetime
