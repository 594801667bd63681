from __future__ import annotations

from pydantic import BaseModel, Field

from common.types import UtcDateTime

from ...models.service import Service
from ...models.status import PublishStatus


class ServiceResponse(BaseModel):
    id: str | None
    title: str
    slug: str
    short_description: str
    full_description: str
    icon: str | None = None
    image: str | None = None
    features: list[str]
    order: int
    publish_status: PublishStatus
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, service: Service) -> "ServiceResponse":
        return cls.model_validate(service.model_dump())


class ServiceCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    short_description: str = ""
    full_description: str = ""
    icon: str | None = None
    image: str | None = None
    features: list[str] = Field(default_factory=list)
    order: int = 0
    publish_status: PublishStatus = PublishStatus.DRAFT


class ServiceUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1)
    short_description: str | None = None
    full_description: str | None = None
    icon: str | None = None
    image: str | None = None
    features: list[str] | None = None
    order: int | None = None
    publish_status: PublishStatus | None = None
