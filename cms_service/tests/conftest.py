from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Any

import pytest
from bson import ObjectId
from gridfs.errors import NoFile
from pydantic import BaseModel

from app.cache import TTLCache
from app.config import (
    AppConfig,
    AuthConfig,
    CacheConfig,
    UploadConfig,
    default_rate_limits,
)
from app.models.settings import SiteSettings
from app.models.status import PublishStatus
from app.models.user import User
from app.rate_limit import FixedWindowRateLimiter
from app.repositories.interfaces import (
    ContentRepositoryInterface,
    SettingsRepositoryInterface,
    UserRepositoryInterface,
)

TEST_SECRET = "test-secret-for-cms-service"


class FakeClock:
    """테스트에서 시간을 직접 움직이기 위한 가짜 시계."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryContentRepository(ContentRepositoryInterface):
    """Mongo 없이 서비스 로직을 검증하기 위한 컨텐츠 저장소.

    호출 횟수를 세어 캐시 적중 여부를 확인할 수 있게 한다.
    """

    def __init__(self) -> None:
        self.items: dict[str, BaseModel] = {}
        self.list_calls = 0
        self.slug_calls = 0

    def list(
        self, publish_status: PublishStatus | None = None, limit: int = 0
    ) -> list[Any]:  # type: ignore[override]
        self.list_calls += 1
        items = [
            item
            for item in self.items.values()
            if publish_status is None or item.publish_status == publish_status
        ]
        items.sort(key=lambda item: getattr(item, "order", 0))
        return items[:limit] if limit else items

    def find_by_id(self, id_value: str) -> Any | None:  # type: ignore[override]
        return self.items.get(id_value)

    def find_by_slug(
        self, slug: str, publish_status: PublishStatus | None = None
    ) -> Any | None:  # type: ignore[override]
        self.slug_calls += 1
        for item in self.items.values():
            if item.slug != slug:
                continue
            if publish_status is not None and item.publish_status != publish_status:
                continue
            return item
        return None

    def is_slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:  # type: ignore[override]
        return any(
            item.slug == slug and item_id != exclude_id
            for item_id, item in self.items.items()
        )

    def insert(self, item: Any) -> Any:  # type: ignore[override]
        item_id = str(ObjectId())
        stored = item.model_copy(update={"id": item_id})
        self.items[item_id] = stored
        return stored

    def update(self, id_value: str, item: Any) -> Any | None:  # type: ignore[override]
        if id_value not in self.items:
            return None
        stored = item.model_copy(
            update={"id": id_value, "updated_at": datetime.now(timezone.utc)}
        )
        self.items[id_value] = stored
        return stored

    def delete(self, id_value: str) -> bool:  # type: ignore[override]
        return self.items.pop(id_value, None) is not None

    def reorder(self, ids: list[str]) -> int:  # type: ignore[override]
        updated = 0
        for index, id_value in enumerate(ids):
            item = self.items.get(id_value)
            if item is None:
                continue
            self.items[id_value] = item.model_copy(update={"order": index + 1})
            updated += 1
        return updated

    def list_featured(self, limit: int) -> list[Any]:
        featured = [
            item
            for item in self.items.values()
            if item.featured and item.publish_status == PublishStatus.PUBLISHED
        ]
        featured.sort(key=lambda item: item.order)
        return featured[:limit]


class InMemoryUserRepository(UserRepositoryInterface):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def find_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    def find_by_id(self, id_value: str) -> User | None:
        return self.users.get(id_value)

    def insert(self, user: User) -> User:
        user_id = str(ObjectId())
        stored = user.model_copy(update={"id": user_id, "email": user.email.lower()})
        self.users[user_id] = stored
        return stored


class InMemorySettingsRepository(SettingsRepositoryInterface):
    def __init__(self, settings: SiteSettings | None = None) -> None:
        self.settings = settings
        self.get_calls = 0

    def get(self) -> SiteSettings | None:
        self.get_calls += 1
        return self.settings

    def save(self, settings: SiteSettings) -> SiteSettings:
        self.settings = settings.model_copy(
            update={"updated_at": datetime.now(timezone.utc)}
        )
        return self.settings


class FakeGridOut:
    def __init__(self, record: dict[str, Any], truncate: bool = False) -> None:
        self._record = record
        self._truncate = truncate
        self.closed = False

    @property
    def metadata(self) -> dict[str, Any]:
        return self._record["metadata"]

    @property
    def filename(self) -> str:
        return self._record["filename"]

    @property
    def length(self) -> int:
        return len(self._record["data"])

    def read(self) -> bytes:
        data = self._record["data"]
        return data[:-1] if self._truncate else data

    def close(self) -> None:
        self.closed = True


class FakeBucket:
    """GridFSBucket 중 BlobStore 가 쓰는 두 메서드만 흉내 낸다."""

    def __init__(self) -> None:
        self.files: dict[ObjectId, dict[str, Any]] = {}
        self.upload_calls: list[dict[str, Any]] = []
        self.truncate_reads = False

    def upload_from_stream(
        self,
        filename: str,
        source: Any,
        chunk_size_bytes: int | None = None,
        metadata: dict | None = None,
    ) -> ObjectId:
        data = source.read() if isinstance(source, io.IOBase) else bytes(source)
        file_id = ObjectId()
        self.files[file_id] = {
            "filename": filename,
            "data": data,
            "metadata": metadata or {},
            "chunk_size_bytes": chunk_size_bytes,
        }
        self.upload_calls.append({"filename": filename, "chunk_size_bytes": chunk_size_bytes})
        return file_id

    def open_download_stream(self, file_id: ObjectId) -> FakeGridOut:
        record = self.files.get(file_id)
        if record is None:
            raise NoFile(f"no file with id {file_id}")
        return FakeGridOut(record, truncate=self.truncate_reads)


def make_app_config(env: str = "development") -> AppConfig:
    return AppConfig(
        env=env,
        auth=AuthConfig(jwt_secret=TEST_SECRET, token_ttl_seconds=3600),
        cache=CacheConfig(),
        rate_limit=default_rate_limits(env),
        uploads=UploadConfig(),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def rate_limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(clock=clock)
