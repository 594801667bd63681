from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..models.service import Service
from ..repositories.interfaces import ServiceRepositoryInterface
from ..repositories.service_repository import ServiceRepository
from .content_service import ContentService


class ServicesService(ContentService[Service]):
    """회사 서비스 항목 조회/관리."""

    collection = "services"
    item_key = "service"
    label = "service"
    model_cls = Service
    related_cache_keys = ("home",)


def get_service_repository(
    db: Database = Depends(get_database),
) -> ServiceRepositoryInterface:
    """FastAPI DI용 ServiceRepository 팩토리."""

    return ServiceRepository(db)


def get_services_service(
    repo: ServiceRepositoryInterface = Depends(get_service_repository),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> ServicesService:
    """FastAPI DI용 ServicesService 팩토리."""

    return ServicesService(repo, cache, config.cache.ttl_for("services"))
