from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


SITE_SETTINGS_ID = "site-settings"
DEFAULT_FEATURED_PROJECTS_LIMIT = 3
MAX_FEATURED_PROJECTS_LIMIT = 12


class SocialLinks(BaseModel):
    facebook: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class SiteSettings(BaseModel):
    """사이트 전역 설정 (settings 컬렉션의 단일 도큐먼트)."""

    site_name: str = ""
    site_description: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    address: str = ""
    featured_projects_limit: int = Field(
        default=DEFAULT_FEATURED_PROJECTS_LIMIT,
        ge=1,
        le=MAX_FEATURED_PROJECTS_LIMIT,
    )
    social_media: SocialLinks = Field(default_factory=SocialLinks)
    updated_at: datetime | None = None
    updated_by: str | None = None
