from __future__ import annotations

from pymongo import DESCENDING

from ..models.page import Page
from .content_repository import MongoContentRepository
from .documents.legacy import PAGE_STATUS_TO_PUBLISH
from .documents.page_document import PageDocument
from .interfaces import PageRepositoryInterface


class PageRepository(MongoContentRepository[Page], PageRepositoryInterface):
    """pages 컬렉션에 대한 MongoDB 접근 레이어. 최신 페이지가 먼저 온다."""

    collection_name = "pages"
    document_cls = PageDocument
    model_cls = Page
    legacy_status_map = PAGE_STATUS_TO_PUBLISH
    default_sort = [("created_at", DESCENDING), ("_id", DESCENDING)]
