from __future__ import annotations

from pydantic import BaseModel, Field

from common.types import UtcDateTime

from ...models.page import Page
from ...models.status import PublishStatus


class PageResponse(BaseModel):
    id: str | None
    title: str
    slug: str
    content: str
    meta_title: str | None = None
    meta_description: str | None = None
    publish_status: PublishStatus
    created_by: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, page: Page) -> "PageResponse":
        return cls.model_validate(page.model_dump())


class PageCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    content: str = ""
    meta_title: str | None = None
    meta_description: str | None = None
    publish_status: PublishStatus = PublishStatus.DRAFT


class PageUpdateRequest(BaseModel):
    """부분 수정 요청. 보내지 않은 필드는 기존 값을 유지한다."""

    title: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1)
    content: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    publish_status: PublishStatus | None = None
