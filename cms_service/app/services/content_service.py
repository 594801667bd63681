from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..cache import TTLCache
from ..exceptions import NotFoundError, SlugConflictError, ValidationError
from ..models.status import PublishStatus
from ..repositories.interfaces import ContentRepositoryInterface


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ContentService(Generic[ModelT]):
    """컨텐츠 컬렉션 공통 조회/관리 로직.

    - 공개 조회는 TTLCache 를 거치고, 모든 쓰기 작업은 관련 캐시 키를 지운다.
    - Repository 인터페이스에만 의존하고, Mongo 세부 구현은 알지 않는다.

    캐시 키 규칙:
        <collection>:published, <collection>:all  목록
        <item_key>:<slug>                          공개 단건
        related_cache_keys                         이 컬렉션을 포함하는 다른 캐시 (home 등)
    """

    collection: ClassVar[str]
    item_key: ClassVar[str]
    label: ClassVar[str]
    model_cls: ClassVar[type[BaseModel]]
    related_cache_keys: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        repo: ContentRepositoryInterface[ModelT],
        cache: TTLCache,
        ttl_seconds: int,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    # --- cache keys ---------------------------------------------------------------
    @property
    def published_key(self) -> str:
        return f"{self.collection}:published"

    @property
    def all_key(self) -> str:
        return f"{self.collection}:all"

    def slug_key(self, slug: str) -> str:
        return f"{self.item_key}:{slug}"

    def _validate(self, data: dict[str, Any]) -> ModelT:
        try:
            item = self.model_cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError.from_model_errors(self.label, exc.errors()) from exc
        if not str(getattr(item, "slug", "")).strip():
            raise ValidationError(f"{self.label} slug is required")
        return item  # type: ignore[return-value]

    # --- queries ------------------------------------------------------------------
    def list_published(self) -> list[ModelT]:
        return self._cache.get_or_compute(
            self.published_key,
            lambda: self._repo.list(publish_status=PublishStatus.PUBLISHED),
            self._ttl_seconds,
        )

    def list_all(self) -> list[ModelT]:
        return self._cache.get_or_compute(
            self.all_key,
            lambda: self._repo.list(),
            self._ttl_seconds,
        )

    def get(self, id_value: str) -> ModelT:
        item = self._repo.find_by_id(id_value)
        if item is None:
            raise NotFoundError(f"{self.label} not found")
        return item

    def get_published_by_slug(self, slug: str) -> ModelT:
        # 없는 slug 는 None 이므로 캐시되지 않는다.
        item = self._cache.get_or_compute(
            self.slug_key(slug),
            lambda: self._repo.find_by_slug(slug, publish_status=PublishStatus.PUBLISHED),
            self._ttl_seconds,
        )
        if item is None:
            raise NotFoundError(f"{self.label} not found")
        return item

    # --- commands -----------------------------------------------------------------
    def create(self, data: dict[str, Any]) -> ModelT:
        now = datetime.now(timezone.utc)
        item = self._validate({**data, "id": None, "created_at": now, "updated_at": now})
        slug = getattr(item, "slug")
        if self._repo.is_slug_taken(slug):
            raise SlugConflictError(self.collection, slug)

        created = self._repo.insert(item)  # type: ignore[arg-type]
        self.invalidate()
        logger.info("%s created (id=%s slug=%s)", self.label, created.id, slug)  # type: ignore[attr-defined]
        return created

    def update(self, id_value: str, changes: dict[str, Any]) -> ModelT:
        """기존 레코드에 changes 를 덮어써 저장한다. 동시 수정은 마지막 쓰기가 이긴다."""

        existing = self.get(id_value)
        changes = {k: v for k, v in changes.items() if k not in ("id", "created_at")}
        merged = self._validate({**existing.model_dump(), **changes})

        new_slug = getattr(merged, "slug")
        if new_slug != getattr(existing, "slug") and self._repo.is_slug_taken(
            new_slug, exclude_id=id_value
        ):
            raise SlugConflictError(self.collection, new_slug)

        updated = self._repo.update(id_value, merged)  # type: ignore[arg-type]
        if updated is None:
            # 조회와 저장 사이에 삭제된 경우
            raise NotFoundError(f"{self.label} not found")
        self.invalidate()
        logger.info("%s updated (id=%s)", self.label, id_value)
        return updated

    def delete(self, id_value: str) -> None:
        if not self._repo.delete(id_value):
            raise NotFoundError(f"{self.label} not found")
        self.invalidate()
        logger.info("%s deleted (id=%s)", self.label, id_value)

    def reorder(self, ids: list[str]) -> int:
        updated = self._repo.reorder(ids)
        self.invalidate()
        logger.info("%s reordered (requested=%d matched=%d)", self.label, len(ids), updated)
        return updated

    def invalidate(self) -> None:
        self._cache.delete_many(self.published_key, self.all_key, *self.related_cache_keys)
        self._cache.delete_prefix(f"{self.item_key}:")
