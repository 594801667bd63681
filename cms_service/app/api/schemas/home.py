from __future__ import annotations

from pydantic import BaseModel

from ...services.home_service import HomeData
from .projects import ProjectResponse
from .services import ServiceResponse
from .settings import SiteSettingsResponse


class HomeResponse(BaseModel):
    """홈 화면 조립용 응답 DTO."""

    settings: SiteSettingsResponse
    featured_projects: list[ProjectResponse]
    services: list[ServiceResponse]

    @classmethod
    def from_domain(cls, data: HomeData) -> "HomeResponse":
        return cls(
            settings=SiteSettingsResponse.from_domain(data.settings),
            featured_projects=[ProjectResponse.from_domain(p) for p in data.featured_projects],
            services=[ServiceResponse.from_domain(s) for s in data.services],
        )
