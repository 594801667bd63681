from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from datetime import datetime, timezone

import pytest
from jose import jwt

from app.models.user import User
from app.security.edge import verify_token_edge
from app.security.tokens import TokenService

from conftest import TEST_SECRET, FakeClock


def _user() -> User:
    now = datetime.now(timezone.utc)
    return User(
        id="65f1c0ffee0000000000beef",
        email="admin@example.com",
        name="Admin",
        role="admin",
        created_at=now,
        updated_at=now,
    )


def _tamper_signature(token: str) -> str:
    # 마지막 문자는 패딩 비트만 바뀔 수 있으므로 서명의 첫 문자를 바꾼다.
    header, payload, signature = token.split(".")
    first = "A" if signature[0] != "A" else "B"
    return f"{header}.{payload}.{first}{signature[1:]}"


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _sign(claims: dict, secret: str = TEST_SECRET, alg: str = "HS256") -> str:
    header = _b64(json.dumps({"alg": alg, "typ": "JWT"}).encode())
    payload = _b64(json.dumps(claims).encode())
    digest = hmac.new(secret.encode(), f"{header}.{payload}".encode(), hashlib.sha256).digest()
    return f"{header}.{payload}.{_b64(digest)}"


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_SECRET, ttl_seconds=7 * 24 * 3600)


def test_issue_then_verify_round_trip(token_service: TokenService) -> None:
    token = token_service.issue(_user())

    claims = token_service.verify(token)

    assert claims is not None
    assert claims.sub == "65f1c0ffee0000000000beef"
    assert claims.email == "admin@example.com"
    assert claims.is_admin
    assert claims.exp - claims.iat == 7 * 24 * 3600


def test_issue_requires_persisted_user(token_service: TokenService) -> None:
    user = _user().model_copy(update={"id": None})
    with pytest.raises(ValueError):
        token_service.issue(user)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c.d"])
def test_verify_rejects_malformed_tokens(token_service: TokenService, token: str) -> None:
    assert token_service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET) is None


def test_expired_token_is_rejected_by_both_verifiers(clock: FakeClock) -> None:
    # given: 7일짜리 토큰을 발급하고 8일이 지남
    service = TokenService(TEST_SECRET, ttl_seconds=7 * 24 * 3600, clock=clock)
    token = service.issue(_user())
    clock.advance(8 * 24 * 3600)

    # when / then
    assert service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET, now=clock()) is None


def test_full_verifier_uses_injected_clock(clock: FakeClock) -> None:
    service = TokenService(TEST_SECRET, ttl_seconds=60, clock=clock)
    token = service.issue(_user())

    # 만료 시각 정각까지는 유효하고, 1초 뒤부터 두 검증기 모두 거절한다.
    clock.advance(60)
    assert service.verify(token) is not None
    assert verify_token_edge(token, TEST_SECRET, now=clock()) is not None

    clock.advance(1)
    assert service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET, now=clock()) is None


def test_not_yet_valid_token_is_rejected_by_both_verifiers(clock: FakeClock) -> None:
    now = int(clock())
    claims = {
        "sub": "u1",
        "email": "e@example.com",
        "name": "N",
        "role": "admin",
        "iat": now,
        "nbf": now + 30,
        "exp": now + 60,
    }
    token = _sign(claims)
    service = TokenService(TEST_SECRET, ttl_seconds=60, clock=clock)

    assert service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET, now=clock()) is None

    clock.advance(30)
    assert service.verify(token) is not None
    assert verify_token_edge(token, TEST_SECRET, now=clock()) is not None


def test_tampered_signature_is_rejected_by_both_verifiers(
    token_service: TokenService,
) -> None:
    token = _tamper_signature(token_service.issue(_user()))

    assert token_service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET) is None


def test_wrong_secret_is_rejected_by_both_verifiers(token_service: TokenService) -> None:
    token = token_service.issue(_user())
    other = TokenService("another-secret", ttl_seconds=3600)

    assert other.verify(token) is None
    assert verify_token_edge(token, "another-secret") is None


def test_edge_verifier_accepts_tokens_issued_by_full_verifier(
    token_service: TokenService,
) -> None:
    token = token_service.issue(_user())

    payload = verify_token_edge(token, TEST_SECRET)

    assert payload is not None
    assert payload["sub"] == "65f1c0ffee0000000000beef"
    assert payload["role"] == "admin"


def test_full_verifier_accepts_tokens_signed_without_jose(token_service: TokenService) -> None:
    now = int(time.time())
    token = _sign(
        {
            "sub": "u1",
            "email": "e@example.com",
            "name": "N",
            "role": "admin",
            "iat": now,
            "exp": now + 60,
        }
    )

    assert token_service.verify(token) is not None
    assert verify_token_edge(token, TEST_SECRET) is not None


@pytest.mark.parametrize(
    "claims",
    [
        # 필수 클레임 누락
        {"sub": "u1", "email": "e", "name": "n", "iat": 0},
        # 타입 불일치
        {"sub": 1, "email": "e", "name": "n", "role": "admin", "iat": 0},
        # bool 은 정수로 보지 않는다
        {"sub": "u1", "email": "e", "name": "n", "role": "admin", "iat": True},
        # audience 가 있는 토큰은 둘 다 거절한다
        {"sub": "u1", "email": "e", "name": "n", "role": "admin", "iat": 0, "aud": "x"},
    ],
)
def test_claim_shape_failures_agree(token_service: TokenService, claims: dict) -> None:
    claims = {"exp": int(time.time()) + 60, **claims}
    token = jwt.encode(claims, TEST_SECRET, algorithm="HS256")

    assert token_service.verify(token) is None
    assert verify_token_edge(token, TEST_SECRET) is None


def test_edge_verifier_rejects_other_algorithms() -> None:
    now = int(time.time())
    claims = {
        "sub": "u1",
        "email": "e",
        "name": "n",
        "role": "admin",
        "iat": now,
        "exp": now + 60,
    }
    token = _sign(claims, alg="none")

    assert verify_token_edge(token, TEST_SECRET) is None
    assert TokenService(TEST_SECRET, ttl_seconds=60).verify(token) is None


def test_edge_verifier_respects_injected_clock(token_service: TokenService) -> None:
    token = token_service.issue(_user())
    claims = verify_token_edge(token, TEST_SECRET)
    assert claims is not None

    assert verify_token_edge(token, TEST_SECRET, now=claims["exp"]) is not None
    assert verify_token_edge(token, TEST_SECRET, now=claims["exp"] + 1) is None
