from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from common.types import ObjectIdStr

from .status import PublishStatus


class TeamMember(BaseModel):
    id: ObjectIdStr | None = None
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
    created_at: datetime
    updated_at: datetime
