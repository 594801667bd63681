from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from common.types import ObjectIdStr

from .status import PublishStatus


class Service(BaseModel):
    """회사가 제공하는 서비스 항목."""

    id: ObjectIdStr | None = None
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
    created_at: datetime
    updated_at: datetime
