from __future__ import annotations

import os


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"
MONGO_TIMEOUT_MS_ENV = "MONGO_TIMEOUT_MS"

DEFAULT_MONGO_URI = "mongodb://localhost:27017/cms"
DEFAULT_MONGO_TIMEOUT_MS = 5000


def get_mongo_uri() -> str:
    """MongoDB 연결에 사용할 URI를 반환한다.

    운영 환경(APP_ENV=production)에서는 MONGO_URI 가 반드시 있어야 하며,
    개발 환경에서는 로컬 MongoDB 를 기본값으로 사용한다.
    """

    value = os.getenv(MONGO_URI_ENV, "").strip()
    if value:
        return value

    if os.getenv("APP_ENV", "development").strip().lower() == "production":
        raise RuntimeError(
            f"{MONGO_URI_ENV} environment variable is required for MongoDB",
        )
    return DEFAULT_MONGO_URI


def get_mongo_db_name() -> str | None:
    """MongoDB에서 사용할 기본 데이터베이스 이름을 반환한다.

    - MONGO_DB_NAME 이 설정되어 있으면 해당 값을 사용한다.
    - 설정되어 있지 않으면 None 을 반환하고, 클라이언트는 URI의 기본 DB를 사용한다.
    """

    value = os.getenv(MONGO_DB_NAME_ENV, "").strip()
    return value or None


def get_mongo_timeout_ms() -> int:
    """서버 선택/연결/소켓 타임아웃(ms)을 반환한다."""

    raw = os.getenv(MONGO_TIMEOUT_MS_ENV)
    if not raw:
        return DEFAULT_MONGO_TIMEOUT_MS
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(
            f"{MONGO_TIMEOUT_MS_ENV} must be an integer if set, got: {raw!r}"
        ) from exc
    if value <= 0:
        raise RuntimeError(f"{MONGO_TIMEOUT_MS_ENV} must be > 0, got: {value}")
    return value
