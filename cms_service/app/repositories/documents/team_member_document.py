from __future__ import annotations

from typing import Any

from pydantic import model_validator

from common.mongo.types import BaseDocument

from ...models.status import PublishStatus
from .legacy import publish_status_from_active_flag, rename_legacy_fields


class TeamMemberDocument(BaseDocument):
    """MongoDB team 컬렉션 도큐먼트 모델."""

    name: str
    slug: str
    position: str = ""
    bio: str = ""
    email: str | None = None
    phone: str | None = None
    image: str | None = None
    linkedin: str | None = None
    order: int = 0
    publish_status: PublishStatus = PublishStatus.DRAFT
    created_by: str = "admin"

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        data = rename_legacy_fields(data, {"linkedIn": "linkedin"})
        return publish_status_from_active_flag(data)
