from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from common.types import ObjectIdStr

from .status import PublishStatus


class Page(BaseModel):
    """slug 로 렌더링되는 동적 페이지."""

    id: ObjectIdStr | None = None
    title: str
    slug: str
    content: str = ""
    meta_title: str | None = None
    meta_description: str | None = None
    publish_status: PublishStatus = PublishStatus.DRAFT
    created_by: str = "admin"
    created_at: datetime
    updated_at: datetime
