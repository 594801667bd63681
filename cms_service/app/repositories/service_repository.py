from __future__ import annotations

from ..models.service import Service
from .content_repository import MongoContentRepository
from .documents.legacy import ACTIVE_STATUS_TO_PUBLISH
from .documents.service_document import ServiceDocument
from .interfaces import ServiceRepositoryInterface


class ServiceRepository(MongoContentRepository[Service], ServiceRepositoryInterface):
    """services 컬렉션에 대한 MongoDB 접근 레이어."""

    collection_name = "services"
    document_cls = ServiceDocument
    model_cls = Service
    legacy_status_map = ACTIVE_STATUS_TO_PUBLISH
