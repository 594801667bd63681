from __future__ import annotations

from enum import StrEnum


class PublishStatus(StrEnum):
    """모든 컨텐츠 레코드가 공유하는 공개 상태 (draft <-> published)."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ProjectStage(StrEnum):
    """프로젝트 진행 단계. 공개 여부(PublishStatus)와는 독립적인 축이다."""

    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
