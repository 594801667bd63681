from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..models.page import Page
from ..repositories.interfaces import PageRepositoryInterface
from ..repositories.page_repository import PageRepository
from .content_service import ContentService


class PagesService(ContentService[Page]):
    """동적 페이지 조회/관리."""

    collection = "pages"
    item_key = "page"
    label = "page"
    model_cls = Page


def get_page_repository(
    db: Database = Depends(get_database),
) -> PageRepositoryInterface:
    """FastAPI DI용 PageRepository 팩토리."""

    return PageRepository(db)


def get_pages_service(
    repo: PageRepositoryInterface = Depends(get_page_repository),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> PagesService:
    """FastAPI DI용 PagesService 팩토리."""

    return PagesService(repo, cache, config.cache.ttl_for("pages"))
