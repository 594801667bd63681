from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .rate_limit import RateLimitConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_FILE_NAME = "config.yaml"

APP_ENV = "APP_ENV"
JWT_SECRET = "JWT_SECRET"
JWT_EXPIRES_IN_SECONDS = "JWT_EXPIRES_IN_SECONDS"
AUTH_COOKIE_NAME = "AUTH_COOKIE_NAME"
ADMIN_EMAIL = "ADMIN_EMAIL"
ADMIN_PASSWORD = "ADMIN_PASSWORD"
ADMIN_NAME = "ADMIN_NAME"
CMS_SERVICE_PORT = "CMS_SERVICE_PORT"

ENV_DEVELOPMENT = "development"
ENV_PRODUCTION = "production"

DEV_JWT_SECRET = "dev-only-jwt-secret-do-not-use-in-production"
DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60

DEFAULT_CACHE_TTL_SECONDS: dict[str, int] = {
    "pages": 300,
    "projects": 300,
    "services": 600,
    "team": 600,
    "settings": 60,
}

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_ALLOWED_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)
DEFAULT_CHUNK_SIZE_BYTES = 255 * 1024
DEFAULT_MAX_TRACKED_IDENTITIES = 10_000


@dataclass(slots=True)
class AuthConfig:
    """토큰 발급/검증 및 인증 쿠키 설정."""

    jwt_secret: str = field(repr=False)
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    cookie_name: str = "auth-token"
    cookie_secure: bool = False


@dataclass(slots=True)
class CacheConfig:
    ttl_seconds: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_CACHE_TTL_SECONDS)
    )

    def ttl_for(self, collection: str) -> int:
        return self.ttl_seconds.get(collection, DEFAULT_CACHE_TTL_SECONDS["pages"])


@dataclass(slots=True)
class RateLimitSettings:
    """엔드포인트 종류별 고정 윈도우 설정."""

    login: RateLimitConfig
    upload: RateLimitConfig
    max_tracked_identities: int = DEFAULT_MAX_TRACKED_IDENTITIES


@dataclass(slots=True)
class UploadConfig:
    max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_mime_types: tuple[str, ...] = DEFAULT_ALLOWED_MIME_TYPES
    chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES
    bucket_name: str = "uploads"


@dataclass(slots=True)
class AdminBootstrapConfig:
    email: str
    password: str = field(repr=False)
    name: str = "Administrator"


@dataclass(slots=True)
class AppConfig:
    """cms-service 전체 설정 루트. create_app 에서 한 번만 로드한다."""

    env: str
    auth: AuthConfig
    cache: CacheConfig
    rate_limit: RateLimitSettings
    uploads: UploadConfig
    admin: AdminBootstrapConfig | None = None
    port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.env == ENV_PRODUCTION


def default_rate_limits(env: str) -> RateLimitSettings:
    """운영/개발 환경별 기본 rate limit 을 반환한다.

    - login: 15분 윈도우, 운영 5회 / 개발 50회
    - upload: 1시간 윈도우, 운영 20회 / 개발 100회
    """

    production = env == ENV_PRODUCTION
    return RateLimitSettings(
        login=RateLimitConfig(
            name="login",
            window_seconds=15 * 60,
            max_requests=5 if production else 50,
        ),
        upload=RateLimitConfig(
            name="upload",
            window_seconds=60 * 60,
            max_requests=20 if production else 100,
        ),
    )


def _find_config_path() -> Path | None:
    """현재 작업 디렉토리 기준으로 상위로 올라가며 config.yaml 을 찾는다."""

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"{path} must contain a mapping at the top level")
    return data


def _positive_int(raw: Any, name: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{name} must be an integer, got: {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be > 0, got: {value}")
    return value


def load_env() -> str:
    raw = (os.getenv(APP_ENV) or ENV_DEVELOPMENT).strip().lower()
    if raw not in (ENV_DEVELOPMENT, ENV_PRODUCTION):
        raise RuntimeError(
            f"{APP_ENV} must be one of {ENV_DEVELOPMENT!r}, {ENV_PRODUCTION!r}, got: {raw!r}"
        )
    return raw


def load_auth_config(env: str) -> AuthConfig:
    secret = os.getenv(JWT_SECRET) or ""
    if not secret:
        if env == ENV_PRODUCTION:
            raise RuntimeError(
                f"{JWT_SECRET} environment variable is required in production"
            )
        logger.warning("%s is not set, using the development secret", JWT_SECRET)
        secret = DEV_JWT_SECRET

    ttl_raw = os.getenv(JWT_EXPIRES_IN_SECONDS)
    ttl = (
        _positive_int(ttl_raw, JWT_EXPIRES_IN_SECONDS)
        if ttl_raw
        else DEFAULT_TOKEN_TTL_SECONDS
    )

    cookie_name = (os.getenv(AUTH_COOKIE_NAME) or "auth-token").strip()

    return AuthConfig(
        jwt_secret=secret,
        token_ttl_seconds=ttl,
        cookie_name=cookie_name,
        cookie_secure=env == ENV_PRODUCTION,
    )


def load_cache_config(data: dict[str, Any]) -> CacheConfig:
    section = (data.get("cache") or {}).get("ttl_seconds") or {}
    ttl_seconds = dict(DEFAULT_CACHE_TTL_SECONDS)
    for key, raw in section.items():
        ttl_seconds[str(key)] = _positive_int(raw, f"cache.ttl_seconds.{key}")
    return CacheConfig(ttl_seconds=ttl_seconds)


def load_rate_limit_settings(env: str, data: dict[str, Any]) -> RateLimitSettings:
    settings = default_rate_limits(env)
    section = data.get("rate_limit") or {}

    for name in ("login", "upload"):
        override = section.get(name) or {}
        if not override:
            continue
        base: RateLimitConfig = getattr(settings, name)
        window = override.get("window_seconds", base.window_seconds)
        max_requests = override.get("max_requests", base.max_requests)
        setattr(
            settings,
            name,
            RateLimitConfig(
                name=name,
                window_seconds=_positive_int(window, f"rate_limit.{name}.window_seconds"),
                max_requests=_positive_int(
                    max_requests, f"rate_limit.{name}.max_requests"
                ),
            ),
        )

    if "max_tracked_identities" in section:
        settings.max_tracked_identities = _positive_int(
            section["max_tracked_identities"], "rate_limit.max_tracked_identities"
        )
    return settings


def load_upload_config(data: dict[str, Any]) -> UploadConfig:
    section = data.get("uploads") or {}
    config = UploadConfig()
    if "max_size_bytes" in section:
        config.max_size_bytes = _positive_int(
            section["max_size_bytes"], "uploads.max_size_bytes"
        )
    if "chunk_size_bytes" in section:
        config.chunk_size_bytes = _positive_int(
            section["chunk_size_bytes"], "uploads.chunk_size_bytes"
        )
    mime_types = section.get("allowed_mime_types")
    if mime_types:
        config.allowed_mime_types = tuple(
            str(item).strip().lower() for item in mime_types if str(item).strip()
        )
    bucket_name = str(section.get("bucket_name") or "").strip()
    if bucket_name:
        config.bucket_name = bucket_name
    return config


def load_admin_bootstrap() -> AdminBootstrapConfig | None:
    email = (os.getenv(ADMIN_EMAIL) or "").strip().lower()
    password = os.getenv(ADMIN_PASSWORD) or ""
    if not email or not password:
        return None
    name = (os.getenv(ADMIN_NAME) or "").strip() or "Administrator"
    return AdminBootstrapConfig(email=email, password=password, name=name)


def load_config(config_path: Path | None = None) -> AppConfig:
    """환경변수와 config.yaml 을 읽어 AppConfig 로 반환한다.

    config.yaml 은 선택 사항이며, 없으면 기본값을 사용한다.
    """

    env = load_env()
    path = config_path or _find_config_path()
    data = _read_yaml(path)

    port_raw = os.getenv(CMS_SERVICE_PORT)
    port = _positive_int(port_raw, CMS_SERVICE_PORT) if port_raw else 8000

    return AppConfig(
        env=env,
        auth=load_auth_config(env),
        cache=load_cache_config(data),
        rate_limit=load_rate_limit_settings(env, data),
        uploads=load_upload_config(data),
        admin=load_admin_bootstrap(),
        port=port,
    )
