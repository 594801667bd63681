from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.database import Database

from ..models.settings import SITE_SETTINGS_ID, SiteSettings
from .interfaces import SettingsRepositoryInterface


class SettingsRepository(SettingsRepositoryInterface):
    """settings 컬렉션의 단일 도큐먼트(_id="site-settings")를 다룬다."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["settings"]

    def get(self) -> SiteSettings | None:
        raw = self._col.find_one({"_id": SITE_SETTINGS_ID})
        if not raw:
            return None
        raw.pop("_id", None)
        # 초기 버전은 camelCase 로 저장했다.
        if "featuredProjectsLimit" in raw:
            raw.setdefault("featured_projects_limit", raw.pop("featuredProjectsLimit"))
        return SiteSettings.model_validate(raw)

    def save(self, settings: SiteSettings) -> SiteSettings:
        payload = settings.model_dump(mode="python")
        payload["updated_at"] = datetime.now(timezone.utc)

        raw = self._col.find_one_and_update(
            {"_id": SITE_SETTINGS_ID},
            {"$set": payload},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        raw.pop("_id", None)
        return SiteSettings.model_validate(raw)
