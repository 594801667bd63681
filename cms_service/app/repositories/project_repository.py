from __future__ import annotations

from pymongo import ASCENDING, DESCENDING

from ..models.project import Project
from ..models.status import PublishStatus
from .content_repository import MongoContentRepository
from .documents.project_document import ProjectDocument
from .interfaces import ProjectRepositoryInterface


class ProjectRepository(MongoContentRepository[Project], ProjectRepositoryInterface):
    """projects 컬렉션에 대한 MongoDB 접근 레이어."""

    collection_name = "projects"
    document_cls = ProjectDocument
    model_cls = Project

    def list_featured(self, limit: int) -> list[Project]:
        cursor = self._col.find(
            {"featured": True, **self._publish_filter(PublishStatus.PUBLISHED)},
            sort=[("order", ASCENDING), ("updated_at", DESCENDING)],
            limit=limit,
        )
        return [self._from_document(raw) for raw in cursor]
