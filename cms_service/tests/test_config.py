from __future__ import annotations

from pathlib import Path

import pytest

from app.config import (
    DEFAULT_TOKEN_TTL_SECONDS,
    DEV_JWT_SECRET,
    default_rate_limits,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "APP_ENV",
        "JWT_SECRET",
        "JWT_EXPIRES_IN_SECONDS",
        "AUTH_COOKIE_NAME",
        "ADMIN_EMAIL",
        "ADMIN_PASSWORD",
        "ADMIN_NAME",
        "CMS_SERVICE_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


def _write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_development_defaults(tmp_path: Path) -> None:
    config = load_config(_write_yaml(tmp_path, "{}\n"))

    assert config.env == "development"
    assert config.auth.jwt_secret == DEV_JWT_SECRET
    assert config.auth.token_ttl_seconds == DEFAULT_TOKEN_TTL_SECONDS
    assert config.auth.cookie_name == "auth-token"
    assert not config.auth.cookie_secure
    assert config.rate_limit.login.max_requests == 50
    assert config.uploads.max_size_bytes == 5 * 1024 * 1024
    assert config.admin is None
    assert config.port == 8000


def test_production_requires_jwt_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("APP_ENV", "production")

    with pytest.raises(RuntimeError):
        load_config(_write_yaml(tmp_path, "{}\n"))


def test_production_limits_and_secure_cookie(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("JWT_SECRET", "prod-secret")

    config = load_config(_write_yaml(tmp_path, "{}\n"))

    assert config.is_production
    assert config.auth.cookie_secure
    assert config.rate_limit.login.max_requests == 5
    assert config.rate_limit.login.window_seconds == 15 * 60
    assert config.rate_limit.upload.max_requests == 20
    assert config.rate_limit.upload.window_seconds == 60 * 60


def test_yaml_overrides(tmp_path: Path) -> None:
    path = _write_yaml(
        tmp_path,
        """
cache:
  ttl_seconds:
    pages: 30
rate_limit:
  login:
    max_requests: 3
  max_tracked_identities: 100
uploads:
  max_size_bytes: 1024
  allowed_mime_types: [IMAGE/PNG]
""",
    )

    config = load_config(path)

    assert config.cache.ttl_for("pages") == 30
    assert config.cache.ttl_for("team") == 600
    assert config.rate_limit.login.max_requests == 3
    assert config.rate_limit.login.window_seconds == 15 * 60
    assert config.rate_limit.max_tracked_identities == 100
    assert config.uploads.max_size_bytes == 1024
    assert config.uploads.allowed_mime_types == ("image/png",)


def test_invalid_values_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_EXPIRES_IN_SECONDS", "soon")
    with pytest.raises(RuntimeError):
        load_config(_write_yaml(tmp_path, "{}\n"))

    monkeypatch.delenv("JWT_EXPIRES_IN_SECONDS")
    with pytest.raises(RuntimeError):
        load_config(_write_yaml(tmp_path, "uploads:\n  max_size_bytes: 0\n"))


def test_admin_bootstrap_requires_email_and_password(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ADMIN_EMAIL", "Owner@Example.com")
    config = load_config(_write_yaml(tmp_path, "{}\n"))
    assert config.admin is None

    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret")
    config = load_config(_write_yaml(tmp_path, "{}\n"))
    assert config.admin is not None
    assert config.admin.email == "owner@example.com"
    assert "s3cret" not in repr(config.admin)


def test_default_rate_limits_by_env() -> None:
    assert default_rate_limits("development").upload.max_requests == 100
    assert default_rate_limits("production").upload.max_requests == 20
