from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from common.types import ObjectIdStr

from .status import ProjectStage, PublishStatus


class Project(BaseModel):
    """포트폴리오 프로젝트.

    stage(진행 단계)와 publish_status(공개 여부)는 서로 독립적으로 바뀐다.
    """

    id: ObjectIdStr | None = None
    title: str
    slug: str
    description: str = ""
    content: str | None = None
    client: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    stage: ProjectStage = ProjectStage.PLANNING
    publish_status: PublishStatus = PublishStatus.DRAFT
    featured: bool = False
    order: int = 0
    images: list[str] = Field(default_factory=list)
    background_image: str | None = None
    created_by: str = "admin"
    created_at: datetime
    updated_at: datetime
