from __future__ import annotations

import logging
import threading
from typing import Optional, cast

from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import get_mongo_db_name, get_mongo_timeout_ms, get_mongo_uri


logger = logging.getLogger(__name__)


CONTENT_COLLECTIONS: tuple[str, ...] = ("pages", "projects", "services", "team")

_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - 서버 선택/연결/소켓 타임아웃을 MONGO_TIMEOUT_MS 로 제한한다.
    - ping 으로 연결을 검증한다.
    - 컨텐츠 컬렉션과 users 컬렉션에 필요한 인덱스를 한 번만 생성한다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        uri = get_mongo_uri()
        timeout_ms = get_mongo_timeout_ms()
        client: MongoClient = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            tz_aware=True,
        )

        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            logger.error("failed to connect to MongoDB: %s", exc)
            client.close()
            raise

        # MONGO_DB_NAME 우선, 없으면 URI의 기본 DB 사용
        db_name = get_mongo_db_name()
        try:
            if db_name:
                db = client[db_name]
            else:
                db = client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            ensure_indexes(db)
        except Exception as exc:  # noqa: BLE001
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            client.close()
            raise

        _client = client
        _db = db

        safe_db = cast(Database, _db)
        logger.info("MongoDB connected and indexes ensured (db=%s)", safe_db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    if _db is None:
        get_client()
    assert _db is not None  # get_client 가 실패했다면 예외가 이미 발생했어야 한다.
    return _db


def close_client() -> None:
    """애플리케이션 종료 시 전역 클라이언트를 닫는다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None


def ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다.

    중복 생성해도 MongoDB 가 처리하므로 idempotent 하다.
    """

    for name in CONTENT_COLLECTIONS:
        indexes = [
            IndexModel([("slug", ASCENDING)], name="uniq_slug", unique=True),
            IndexModel(
                [("publish_status", ASCENDING), ("order", ASCENDING)],
                name="idx_publish_status_order",
            ),
            IndexModel(
                [("publish_status", ASCENDING), ("created_at", DESCENDING)],
                name="idx_publish_status_created_at_desc",
            ),
        ]
        if name == "projects":
            indexes.append(
                IndexModel(
                    [
                        ("featured", ASCENDING),
                        ("publish_status", ASCENDING),
                        ("order", ASCENDING),
                    ],
                    name="idx_featured_publish_status_order",
                )
            )
        db[name].create_indexes(indexes)

    db["users"].create_index(
        [("email", ASCENDING)],
        name="uniq_email",
        unique=True,
    )
