from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..exceptions import ValidationError
from ..models.settings import SiteSettings
from ..repositories.interfaces import SettingsRepositoryInterface
from ..repositories.settings_repository import SettingsRepository


logger = logging.getLogger(__name__)

SETTINGS_CACHE_KEY = "settings"


class SettingsService:
    """사이트 설정 조회/수정. 저장된 설정이 없으면 기본값을 돌려준다."""

    def __init__(
        self,
        repo: SettingsRepositoryInterface,
        cache: TTLCache,
        ttl_seconds: int,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def get(self) -> SiteSettings:
        return self._cache.get_or_compute(
            SETTINGS_CACHE_KEY,
            lambda: self._repo.get() or SiteSettings(),
            self._ttl_seconds,
        )

    def update(self, changes: dict[str, Any], updated_by: str) -> SiteSettings:
        current = self._repo.get() or SiteSettings()
        changes = {k: v for k, v in changes.items() if k not in ("updated_at", "updated_by")}
        try:
            merged = SiteSettings.model_validate(
                {**current.model_dump(), **changes, "updated_by": updated_by}
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_model_errors("settings", exc.errors()) from exc

        saved = self._repo.save(merged)
        # home 은 featured_projects_limit 에 의존한다.
        self._cache.delete_many(SETTINGS_CACHE_KEY, "home")
        logger.info("site settings updated (by=%s)", updated_by)
        return saved


def get_settings_repository(
    db: Database = Depends(get_database),
) -> SettingsRepositoryInterface:
    """FastAPI DI용 SettingsRepository 팩토리."""

    return SettingsRepository(db)


def get_settings_service(
    repo: SettingsRepositoryInterface = Depends(get_settings_repository),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> SettingsService:
    """FastAPI DI용 SettingsService 팩토리."""

    return SettingsService(repo, cache, config.cache.ttl_for("settings"))
