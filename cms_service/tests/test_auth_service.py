from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.config import AdminBootstrapConfig
from app.exceptions import InvalidCredentialsError, ThrottledError, ValidationError
from app.models.user import User
from app.rate_limit import FixedWindowRateLimiter, RateLimitConfig
from app.security.passwords import hash_password, verify_password
from app.security.tokens import TokenService
from app.services.auth_service import AuthService

from conftest import TEST_SECRET, FakeClock, InMemoryUserRepository


LOGIN = RateLimitConfig(name="login", window_seconds=900, max_requests=5)


@pytest.fixture
def users() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    now = datetime.now(timezone.utc)
    repo.insert(
        User(
            email="admin@example.com",
            name="Admin",
            role="admin",
            password_hash=hash_password("correct horse"),
            created_at=now,
            updated_at=now,
        )
    )
    return repo


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def service(
    users: InMemoryUserRepository,
    token_service: TokenService,
    rate_limiter: FixedWindowRateLimiter,
) -> AuthService:
    return AuthService(users, token_service, rate_limiter, LOGIN)


def test_login_returns_verifiable_token(
    service: AuthService, token_service: TokenService
) -> None:
    user, token = service.login("Admin@Example.com", "correct horse", "1.2.3.4")

    claims = token_service.verify(token)
    assert claims is not None
    assert claims.sub == user.id
    assert claims.role == "admin"


@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@example.com", "wrong password"),
        ("nobody@example.com", "correct horse"),
    ],
)
def test_login_failures_are_indistinguishable(
    service: AuthService, email: str, password: str
) -> None:
    with pytest.raises(InvalidCredentialsError) as exc_info:
        service.login(email, password, "1.2.3.4")

    assert str(exc_info.value) == "invalid credentials"


def test_login_requires_both_fields(service: AuthService) -> None:
    with pytest.raises(ValidationError):
        service.login("", "", "1.2.3.4")


def test_sixth_attempt_in_window_is_throttled_even_with_correct_password(
    service: AuthService,
) -> None:
    # given: 같은 IP 에서 틀린 비밀번호 5회
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            service.login("admin@example.com", "wrong password", "1.2.3.4")

    # when / then: 6번째는 비밀번호가 맞아도 거절된다.
    with pytest.raises(ThrottledError) as exc_info:
        service.login("admin@example.com", "correct horse", "1.2.3.4")

    assert exc_info.value.retry_after >= 1
    assert exc_info.value.limit == 5


def test_throttle_lifts_after_window(service: AuthService, clock: FakeClock) -> None:
    for _ in range(6):
        with pytest.raises((InvalidCredentialsError, ThrottledError)):
            service.login("admin@example.com", "wrong password", "1.2.3.4")

    clock.advance(901)

    user, _ = service.login("admin@example.com", "correct horse", "1.2.3.4")
    assert user.email == "admin@example.com"


def test_other_identity_is_not_throttled(service: AuthService) -> None:
    for _ in range(6):
        with pytest.raises((InvalidCredentialsError, ThrottledError)):
            service.login("admin@example.com", "wrong password", "1.2.3.4")

    user, _ = service.login("admin@example.com", "correct horse", "5.6.7.8")
    assert user.email == "admin@example.com"


def test_current_user_rejects_deleted_account(
    service: AuthService, users: InMemoryUserRepository, token_service: TokenService
) -> None:
    user, token = service.login("admin@example.com", "correct horse", "1.2.3.4")
    claims = token_service.verify(token)
    assert claims is not None

    users.users.pop(user.id)  # type: ignore[arg-type]

    with pytest.raises(InvalidCredentialsError):
        service.current_user(claims)


def test_ensure_admin_user_is_idempotent(service: AuthService) -> None:
    bootstrap = AdminBootstrapConfig(email="owner@example.com", password="s3cret", name="Owner")

    first = service.ensure_admin_user(bootstrap)
    second = service.ensure_admin_user(bootstrap)

    assert first.id == second.id
    assert first.role == "admin"
    assert verify_password("s3cret", first.password_hash)


def test_password_hashing_limits() -> None:
    with pytest.raises(ValueError):
        hash_password("")
    with pytest.raises(ValueError):
        hash_password("x" * 73)

    assert not verify_password("x" * 73, hash_password("x" * 72))
    assert not verify_password("anything", "not-a-bcrypt-hash")
