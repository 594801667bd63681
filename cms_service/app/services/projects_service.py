from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..models.project import Project
from ..repositories.interfaces import ProjectRepositoryInterface
from ..repositories.project_repository import ProjectRepository
from .content_service import ContentService


FEATURED_KEY_PREFIX = "projects:featured"


class ProjectsService(ContentService[Project]):
    """프로젝트 조회/관리. 홈 화면의 featured 목록도 여기서 가져온다."""

    collection = "projects"
    item_key = "project"
    label = "project"
    model_cls = Project
    related_cache_keys = ("home",)

    _repo: ProjectRepositoryInterface

    def list_featured(self, limit: int) -> list[Project]:
        return self._cache.get_or_compute(
            f"{FEATURED_KEY_PREFIX}:{limit}",
            lambda: self._repo.list_featured(limit),
            self._ttl_seconds,
        )

    def invalidate(self) -> None:
        super().invalidate()
        self._cache.delete_prefix(FEATURED_KEY_PREFIX)


def get_project_repository(
    db: Database = Depends(get_database),
) -> ProjectRepositoryInterface:
    """FastAPI DI용 ProjectRepository 팩토리."""

    return ProjectRepository(db)


def get_projects_service(
    repo: ProjectRepositoryInterface = Depends(get_project_repository),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> ProjectsService:
    """FastAPI DI용 ProjectsService 팩토리."""

    return ProjectsService(repo, cache, config.cache.ttl_for("projects"))
