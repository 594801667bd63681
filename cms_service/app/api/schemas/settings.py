from __future__ import annotations

from pydantic import BaseModel, Field

from common.types import UtcDateTime

from ...models.settings import MAX_FEATURED_PROJECTS_LIMIT, SiteSettings, SocialLinks


class SiteSettingsResponse(BaseModel):
    site_name: str
    site_description: str
    contact_email: str
    contact_phone: str
    address: str
    featured_projects_limit: int
    social_media: SocialLinks
    updated_at: UtcDateTime | None = None

    @classmethod
    def from_domain(cls, settings: SiteSettings) -> "SiteSettingsResponse":
        return cls.model_validate(settings.model_dump())


class SiteSettingsUpdateRequest(BaseModel):
    site_name: str | None = None
    site_description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    featured_projects_limit: int | None = Field(
        default=None, ge=1, le=MAX_FEATURED_PROJECTS_LIMIT
    )
    social_media: SocialLinks | None = None
