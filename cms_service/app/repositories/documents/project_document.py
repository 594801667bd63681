from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from common.mongo.types import BaseDocument, MongoDateTime

from ...models.status import ProjectStage, PublishStatus
from .legacy import rename_legacy_fields


class ProjectDocument(BaseDocument):
    """MongoDB projects 컬렉션 도큐먼트 모델."""

    title: str
    slug: str
    description: str = ""
    content: str | None = None
    client: str | None = None
    start_date: MongoDateTime | None = None
    end_date: MongoDateTime | None = None
    stage: ProjectStage = ProjectStage.PLANNING
    publish_status: PublishStatus = PublishStatus.DRAFT
    featured: bool = False
    order: int = 0
    images: list[str] = Field(default_factory=list)
    background_image: str | None = None
    created_by: str = "admin"

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        data = rename_legacy_fields(
            data,
            {
                "startDate": "start_date",
                "endDate": "end_date",
                "backgroundImage": "background_image",
            },
        )
        # 예전 도큐먼트는 진행 단계를 status 에 저장했다.
        if isinstance(data, dict) and "stage" not in data:
            legacy = data.pop("status", None)
            if legacy in {stage.value for stage in ProjectStage}:
                data["stage"] = legacy
        return data

