from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..models.project import Project
from ..models.service import Service
from ..models.settings import SiteSettings
from .projects_service import ProjectsService, get_projects_service
from .services_service import ServicesService, get_services_service
from .settings_service import SettingsService, get_settings_service


HOME_CACHE_KEY = "home"
HOME_SERVICES_LIMIT = 6


@dataclass(frozen=True, slots=True)
class HomeData:
    settings: SiteSettings
    featured_projects: list[Project]
    services: list[Service]


class HomeService:
    """홈 화면 데이터: 사이트 설정, featured 프로젝트, 공개 서비스 최대 6개."""

    def __init__(
        self,
        settings_service: SettingsService,
        projects_service: ProjectsService,
        services_service: ServicesService,
        cache: TTLCache,
        ttl_seconds: int,
    ) -> None:
        self._settings_service = settings_service
        self._projects_service = projects_service
        self._services_service = services_service
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def get_home(self) -> HomeData:
        return self._cache.get_or_compute(HOME_CACHE_KEY, self._load, self._ttl_seconds)

    def _load(self) -> HomeData:
        settings = self._settings_service.get()
        projects = self._projects_service.list_featured(settings.featured_projects_limit)
        services = self._services_service.list_published()[:HOME_SERVICES_LIMIT]
        return HomeData(
            settings=settings,
            featured_projects=projects,
            services=services,
        )


def get_home_service(
    settings_service: SettingsService = Depends(get_settings_service),
    projects_service: ProjectsService = Depends(get_projects_service),
    services_service: ServicesService = Depends(get_services_service),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> HomeService:
    """FastAPI DI용 HomeService 팩토리."""

    # home 은 projects 와 같은 주기로 갱신한다.
    return HomeService(
        settings_service,
        projects_service,
        services_service,
        cache,
        config.cache.ttl_for("projects"),
    )
