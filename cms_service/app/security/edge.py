"""표준 라이브러리만으로 동작하는 경량 토큰 검증기.

python-jose 를 쓸 수 없는 요청 가로채기 계층(AdminGuardMiddleware)에서 사용한다.
서명(HS256), 만료, 클레임 형식에 대해 TokenService.verify 와 같은 결론을 내야 하므로
규칙을 바꿀 때는 두 검증기를 같이 바꾸고 tests/test_tokens.py 의 일치 테스트를 돌린다.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any


ALGORITHM = "HS256"

# 클레임 이름 -> 허용 타입
REQUIRED_CLAIMS: dict[str, type] = {
    "sub": str,
    "email": str,
    "name": str,
    "role": str,
    "iat": int,
    "exp": int,
}


def has_required_claims(payload: Any) -> bool:
    """두 검증기가 공유하는 클레임 형식 검사."""

    if not isinstance(payload, dict):
        return False
    for name, expected in REQUIRED_CLAIMS.items():
        value = payload.get(name)
        # bool 은 int 의 하위 타입이므로 따로 걸러낸다.
        if isinstance(value, bool) or not isinstance(value, expected):
            return False
    return True


def time_claims_valid(payload: dict[str, Any], current: int) -> bool:
    """exp/nbf 를 current(초) 기준으로 검사한다. 두 검증기가 같은 시계 규칙을 쓴다."""

    if payload["exp"] < current:
        return False
    nbf = payload.get("nbf")
    if nbf is not None:
        if isinstance(nbf, bool) or not isinstance(nbf, int) or nbf > current:
            return False
    return True


def _b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _decode_json_segment(segment: str) -> Any:
    return json.loads(_b64url_decode(segment))


def verify_token_edge(
    token: str, secret: str, now: float | None = None
) -> dict[str, Any] | None:
    """토큰을 검증하고 클레임 dict 를 반환한다. 실패 사유와 관계없이 None 을 반환한다."""

    if not token or not secret:
        return None

    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_segment, payload_segment, signature_segment = parts

    try:
        header = _decode_json_segment(header_segment)
        payload = _decode_json_segment(payload_segment)
        signature = _b64url_decode(signature_segment)
    except (ValueError, UnicodeError, binascii.Error):
        return None

    if not isinstance(header, dict) or header.get("alg") != ALGORITHM:
        return None

    signing_input = f"{header_segment}.{payload_segment}".encode("ascii")
    expected = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(signature, expected):
        return None

    if not has_required_claims(payload):
        return None

    current = int(time.time() if now is None else now)
    if not time_claims_valid(payload, current):
        return None

    # python-jose 가 audience 없이 decode 할 때 거절하는 클레임 조합을 똑같이 거절한다.
    if "aud" in payload:
        return None
    if "jti" in payload and not isinstance(payload["jti"], str):
        return None

    return payload
