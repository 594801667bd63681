from __future__ import annotations

from pydantic import BaseModel, Field

from common.types import UtcDateTime

from ...models.status import PublishStatus
from ...models.team_member import TeamMember


class TeamMemberResponse(BaseModel):
    id: str | None
    name: str
    slug: str
    position: str
    bio: str
    email: str | None = None
    phone: str | None = None
    image: str | None = None
    linkedin: str | None = None
    order: int
    publish_status: PublishStatus
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, member: TeamMember) -> "TeamMemberResponse":
        return cls.model_validate(member.model_dump())


class TeamMemberCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    position: str = ""
    bio: str = ""
    email: str | None = None
    phone: str | None = None
    image: str | None = None
    linkedin: str | None = None
    order: int = 0
    publish_status: PublishStatus = PublishStatus.DRAFT


class TeamMemberUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1)
    position: str | None = None
    bio: str | None = None
    email: str | None = None
    phone: str | None = None
    image: str | None = None
    linkedin: str | None = None
    order: int | None = None
    publish_status: PublishStatus | None = None
