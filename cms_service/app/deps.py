from __future__ import annotations

from fastapi import Depends, Request
from pymongo.database import Database

from common.mongo.client import get_database

from .blob_store import BlobStore
from .cache import TTLCache
from .config import AppConfig
from .rate_limit import FixedWindowRateLimiter
from .security.tokens import TokenService


# create_app 이 app.state 에 올려 둔 프로세스 단위 객체들을 꺼내는 DI 함수들.
# 테스트에서는 app.dependency_overrides 로 바꿔 끼운다.


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_blob_store(
    config: AppConfig = Depends(get_app_config),
    db: Database = Depends(get_database),
) -> BlobStore:
    """FastAPI DI용 BlobStore 팩토리 (GridFS 버킷)."""

    uploads = config.uploads
    return BlobStore.from_database(
        db,
        bucket_name=uploads.bucket_name,
        allowed_mime_types=uploads.allowed_mime_types,
        max_size_bytes=uploads.max_size_bytes,
        chunk_size_bytes=uploads.chunk_size_bytes,
    )
