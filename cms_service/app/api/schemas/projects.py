from __future__ import annotations

from pydantic import BaseModel, Field

from common.types import UtcDateTime

from ...models.project import Project
from ...models.status import ProjectStage, PublishStatus


class ProjectResponse(BaseModel):
    """프로젝트 응답 DTO."""

    id: str | None
    title: str
    slug: str
    description: str
    content: str | None = None
    client: str | None = None
    start_date: UtcDateTime | None = None
    end_date: UtcDateTime | None = None
    stage: ProjectStage
    publish_status: PublishStatus
    featured: bool
    order: int
    images: list[str]
    background_image: str | None = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectResponse":
        return cls.model_validate(project.model_dump())


class ProjectCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    content: str | None = None
    client: str | None = None
    start_date: UtcDateTime | None = None
    end_date: UtcDateTime | None = None
    stage: ProjectStage = ProjectStage.PLANNING
    publish_status: PublishStatus = PublishStatus.DRAFT
    featured: bool = False
    order: int = 0
    images: list[str] = Field(default_factory=list)
    background_image: str | None = None


class ProjectUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1)
    description: str | None = None
    content: str | None = None
    client: str | None = None
    start_date: UtcDateTime | None = None
    end_date: UtcDateTime | None = None
    stage: ProjectStage | None = None
    publish_status: PublishStatus | None = None
    featured: bool | None = None
    order: int | None = None
    images: list[str] | None = None
    background_image: str | None = None
