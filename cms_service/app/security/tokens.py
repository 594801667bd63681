from __future__ import annotations

import logging
import time
from typing import Callable

from jose import JWTError, jwt
from pydantic import BaseModel

from ..models.user import User
from .edge import ALGORITHM, has_required_claims, time_claims_valid


logger = logging.getLogger(__name__)


class TokenClaims(BaseModel):
    """인증 토큰에 담기는 사용자 식별 클레임."""

    sub: str
    email: str
    name: str
    role: str
    iat: int
    exp: int

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class TokenService:
    """HS256 JWT 발급/검증.

    verify 는 형식 오류, 서명 불일치, 만료를 모두 None 하나로 돌려준다.
    발급(iat/exp)과 만료 검사(exp/nbf)는 모두 주입된 clock 을 기준으로 한다.
    호출 측은 허용/거부만 알면 되고, 실패 사유를 클라이언트에 노출하지 않는다.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, user: User) -> str:
        if user.id is None:
            raise ValueError("cannot issue a token for a user without id")

        issued_at = int(self._clock())
        claims = {
            "sub": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> TokenClaims | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_nbf": False},
            )
        except JWTError as exc:
            logger.debug("token verification failed: %s", exc.__class__.__name__)
            return None

        if not has_required_claims(payload):
            logger.debug("token verification failed: unexpected claim shape")
            return None
        if not time_claims_valid(payload, int(self._clock())):
            logger.debug("token verification failed: expired or not yet valid")
            return None
        return TokenClaims.model_validate(payload)
