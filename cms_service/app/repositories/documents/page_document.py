from __future__ import annotations

from typing import Any

from pydantic import model_validator

from common.mongo.types import BaseDocument

from ...models.status import PublishStatus
from .legacy import PAGE_STATUS_TO_PUBLISH, rename_legacy_fields


class PageDocument(BaseDocument):
    """MongoDB pages 컬렉션 도큐먼트 모델."""

    title: str
    slug: str
    content: str = ""
    meta_title: str | None = None
    meta_description: str | None = None
    publish_status: PublishStatus = PublishStatus.DRAFT
    created_by: str = "admin"

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        data = rename_legacy_fields(data, {})
        if isinstance(data, dict) and "publish_status" not in data:
            legacy = data.pop("status", None)
            if legacy in PAGE_STATUS_TO_PUBLISH:
                data["publish_status"] = PAGE_STATUS_TO_PUBLISH[legacy]
        return data
