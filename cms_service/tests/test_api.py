from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.blob_store import BlobStore
from app.config import AppConfig, RateLimitSettings, UploadConfig
from app.deps import get_blob_store
from app.main import create_app
from app.middleware.admin_guard import read_cookie
from app.models.user import User
from app.rate_limit import RateLimitConfig
from app.security.passwords import hash_password
from app.security.tokens import TokenService
from app.services.auth_service import get_user_repository
from app.services.pages_service import get_page_repository
from app.services.projects_service import get_project_repository
from app.services.services_service import get_service_repository
from app.services.settings_service import get_settings_repository
from app.services.team_service import get_team_repository

from conftest import (
    TEST_SECRET,
    FakeBucket,
    InMemoryContentRepository,
    InMemorySettingsRepository,
    InMemoryUserRepository,
    make_app_config,
)


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class ApiHarness:
    """create_app 에 인메모리 저장소를 주입한 테스트용 묶음."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.app = create_app(config)
        self.users = InMemoryUserRepository()
        self.pages = InMemoryContentRepository()
        self.projects = InMemoryContentRepository()
        self.services = InMemoryContentRepository()
        self.team = InMemoryContentRepository()
        self.settings = InMemorySettingsRepository()
        self.bucket = FakeBucket()

        uploads = config.uploads
        blob_store = BlobStore(
            self.bucket,
            allowed_mime_types=uploads.allowed_mime_types,
            max_size_bytes=uploads.max_size_bytes,
            chunk_size_bytes=uploads.chunk_size_bytes,
        )

        overrides = self.app.dependency_overrides
        overrides[get_user_repository] = lambda: self.users
        overrides[get_page_repository] = lambda: self.pages
        overrides[get_project_repository] = lambda: self.projects
        overrides[get_service_repository] = lambda: self.services
        overrides[get_team_repository] = lambda: self.team
        overrides[get_settings_repository] = lambda: self.settings
        overrides[get_blob_store] = lambda: blob_store

        now = datetime.now(timezone.utc)
        self.admin = self.users.insert(
            User(
                email=ADMIN_EMAIL,
                name="Admin",
                role="admin",
                password_hash=hash_password(ADMIN_PASSWORD),
                created_at=now,
                updated_at=now,
            )
        )

        # lifespan(Mongo 연결)은 실행하지 않도록 컨텍스트 매니저 없이 생성한다.
        self.client = TestClient(self.app)

    def login(self) -> None:
        response = self.client.post(
            "/api/v1/auth/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        )
        assert response.status_code == 200, response.text


@pytest.fixture
def harness() -> ApiHarness:
    return ApiHarness(make_app_config())


@pytest.fixture
def admin(harness: ApiHarness) -> ApiHarness:
    harness.login()
    return harness


def test_health(harness: ApiHarness) -> None:
    response = harness.client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "x-request-id" in response.headers


def test_login_sets_http_only_cookie(harness: ApiHarness) -> None:
    response = harness.client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["user"]["email"] == ADMIN_EMAIL
    assert "password_hash" not in response.json()["user"]
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("auth-token=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=3600" in set_cookie


def test_login_with_wrong_password(harness: ApiHarness) -> None:
    response = harness.client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": "nope"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "invalid credentials"}


def test_login_is_rate_limited() -> None:
    config = make_app_config()
    config.rate_limit = RateLimitSettings(
        login=RateLimitConfig(name="login", window_seconds=900, max_requests=2),
        upload=config.rate_limit.upload,
    )
    harness = ApiHarness(config)

    for _ in range(2):
        harness.client.post(
            "/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"}
        )
    response = harness.client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 429
    assert int(response.headers["retry-after"]) >= 1
    assert response.headers["x-ratelimit-limit"] == "2"
    assert response.json()["success"] is False


def test_me_requires_cookie(harness: ApiHarness) -> None:
    response = harness.client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "unauthenticated"


def test_me_and_logout(admin: ApiHarness) -> None:
    me = admin.client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == admin.admin.id

    logout = admin.client.post("/api/v1/auth/logout")
    assert logout.status_code == 200
    assert admin.client.get("/api/v1/auth/me").status_code == 401


def test_admin_api_is_guarded_without_cookie(harness: ApiHarness) -> None:
    response = harness.client.get("/api/v1/admin/projects")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "unauthenticated"}


def test_guard_clears_invalid_cookie(harness: ApiHarness) -> None:
    harness.client.cookies.set("auth-token", "garbage.token.value")

    response = harness.client.get("/api/v1/admin/pages")

    assert response.status_code == 401
    assert "auth-token=;" in response.headers.get("set-cookie", "")


def test_non_admin_role_is_forbidden(harness: ApiHarness) -> None:
    now = datetime.now(timezone.utc)
    editor = harness.users.insert(
        User(email="editor@example.com", name="Editor", role="editor", created_at=now, updated_at=now)
    )
    token = TokenService(TEST_SECRET, ttl_seconds=3600).issue(editor)
    harness.client.cookies.set("auth-token", token)

    response = harness.client.get("/api/v1/admin/projects")

    assert response.status_code == 403


def test_project_lifecycle_through_public_and_admin_api(admin: ApiHarness) -> None:
    client = admin.client

    # given: draft 프로젝트 생성
    created = client.post(
        "/api/v1/admin/projects",
        json={"title": "Tower", "slug": "tower", "stage": "in-progress"},
    )
    assert created.status_code == 201
    project_id = created.json()["id"]

    # draft 는 공개 API 에 보이지 않는다.
    assert client.get("/api/v1/projects").json() == []
    assert client.get("/api/v1/projects/tower").status_code == 404

    # when: 공개로 전환
    updated = client.put(
        f"/api/v1/admin/projects/{project_id}",
        json={"publish_status": "published", "featured": True},
    )
    assert updated.status_code == 200
    assert updated.json()["stage"] == "in-progress"

    # then
    public = client.get("/api/v1/projects/tower")
    assert public.status_code == 200
    assert public.json()["publish_status"] == "published"
    home = client.get("/api/v1/home").json()
    assert [p["slug"] for p in home["featured_projects"]] == ["tower"]

    deleted = client.delete(f"/api/v1/admin/projects/{project_id}")
    assert deleted.status_code == 200
    assert client.get("/api/v1/projects").json() == []
    assert client.get("/api/v1/home").json()["featured_projects"] == []


def test_duplicate_slug_is_rejected(admin: ApiHarness) -> None:
    body = {"title": "About", "slug": "about"}
    assert admin.client.post("/api/v1/admin/pages", json=body).status_code == 201

    response = admin.client.post("/api/v1/admin/pages", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_invalid_body_is_a_validation_error(admin: ApiHarness) -> None:
    response = admin.client.post(
        "/api/v1/admin/projects",
        json={"title": "Tower", "slug": "tower", "stage": "paused"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unknown_admin_record_is_not_found(admin: ApiHarness) -> None:
    response = admin.client.get("/api/v1/admin/team/not-an-id")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "team member not found"}


def test_reorder_services(admin: ApiHarness) -> None:
    ids = []
    for slug in ("design", "build", "operate"):
        response = admin.client.post(
            "/api/v1/admin/services",
            json={"title": slug, "slug": slug, "publish_status": "published"},
        )
        ids.append(response.json()["id"])

    response = admin.client.put(
        "/api/v1/admin/services/reorder", json={"ids": list(reversed(ids))}
    )

    assert response.status_code == 200
    assert response.json() == {"updated": 3}
    public = admin.client.get("/api/v1/services").json()
    assert [s["slug"] for s in public] == ["operate", "build", "design"]
    assert [s["order"] for s in public] == [1, 2, 3]


def test_settings_update_and_public_read(admin: ApiHarness) -> None:
    response = admin.client.put(
        "/api/v1/admin/settings",
        json={"site_name": "Acme", "featured_projects_limit": 5},
    )
    assert response.status_code == 200

    public = admin.client.get("/api/v1/settings").json()
    assert public["site_name"] == "Acme"
    assert public["featured_projects_limit"] == 5
    assert admin.settings.settings is not None
    assert admin.settings.settings.updated_by == ADMIN_EMAIL

    invalid = admin.client.put(
        "/api/v1/admin/settings", json={"featured_projects_limit": 99}
    )
    assert invalid.status_code == 400


def test_upload_and_download(admin: ApiHarness) -> None:
    response = admin.client.post(
        "/api/v1/admin/uploads",
        files={"file": ("logo.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["url"] == f"/api/v1/files/{body['file_id']}"

    download = admin.client.get(body["url"])
    assert download.status_code == 200
    assert download.content == PNG_BYTES
    assert download.headers["content-type"] == "image/png"


def test_upload_rejects_non_image(admin: ApiHarness) -> None:
    response = admin.client.post(
        "/api/v1/admin/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert admin.bucket.files == {}


def test_upload_rejects_oversized_file() -> None:
    config = make_app_config()
    config.uploads = UploadConfig(max_size_bytes=16)
    harness = ApiHarness(config)
    harness.login()

    response = harness.client.post(
        "/api/v1/admin/uploads",
        files={"file": ("logo.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 400
    assert "too large" in response.json()["message"]
    assert harness.bucket.files == {}


def test_unknown_file_is_not_found(harness: ApiHarness) -> None:
    assert harness.client.get("/api/v1/files/65f1c0ffee0000000000beef").status_code == 404
    assert harness.client.get("/api/v1/files/not-an-id").status_code == 404


def test_guard_reads_auth_cookie_after_unparseable_cookie(admin: ApiHarness) -> None:
    # given: JSON 값을 가진 다른 쿠키가 인증 쿠키보다 앞에 온다.
    token = admin.client.cookies.get("auth-token")
    admin.client.cookies.clear()
    headers = {"Cookie": f'prefs={{"theme":"dark"}}; auth-token={token}'}

    # when
    me = admin.client.get("/api/v1/auth/me", headers=headers)
    guarded = admin.client.get("/api/v1/admin/projects", headers=headers)

    # then: 핸들러와 guard 가 같은 쿠키를 본다.
    assert me.status_code == 200
    assert guarded.status_code == 200


def test_read_cookie_matches_request_cookies() -> None:
    scope = {
        "type": "http",
        "headers": [(b"cookie", b'prefs={"theme":"dark"}; auth-token=abc.def.ghi')],
    }

    assert read_cookie(scope, "auth-token") == "abc.def.ghi"
    assert read_cookie(scope, "missing") is None
    assert read_cookie({"type": "http", "headers": []}, "auth-token") is None
