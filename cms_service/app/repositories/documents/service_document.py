from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from common.mongo.types import BaseDocument

from ...models.status import PublishStatus
from .legacy import publish_status_from_active_flag, rename_legacy_fields


class ServiceDocument(BaseDocument):
    """MongoDB services 컬렉션 도큐먼트 모델."""

    title: str
    slug: str
    short_description: str = ""
    full_description: str = ""
    icon: str | None = None
    image: str | None = None
    features: list[str] = Field(default_factory=list)
    order: int = 0
    publish_status: PublishStatus = PublishStatus.DRAFT
    created_by: str = "admin"

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        data = rename_legacy_fields(
            data,
            {
                "shortDescription": "short_description",
                "fullDescription": "full_description",
            },
        )
        return publish_status_from_active_flag(data)
