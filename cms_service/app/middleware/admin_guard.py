"""관리자 API 앞단의 경량 인증 게이트.

python-jose 에 기대지 않는 순수 ASGI 미들웨어로,
쿠키의 토큰을 security.edge.verify_token_edge 로만 확인한다.
통과한 요청도 핸들러의 require_admin 에서 TokenService 로 다시 검증된다.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable, Callable

from starlette.requests import cookie_parser

from ..security.edge import verify_token_edge


logger = logging.getLogger(__name__)

Scope = dict[str, Any]
Receive = Callable[[], Awaitable[dict[str, Any]]]
Send = Callable[[dict[str, Any]], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

DEFAULT_PROTECTED_PREFIX = "/api/v1/admin"


def read_cookie(scope: Scope, name: str) -> str | None:
    """핸들러의 request.cookies 와 같은 규칙으로 쿠키를 읽는다.

    첫 번째 Cookie 헤더만 보고, 해석할 수 없는 다른 쿠키가 있어도 나머지는 읽는다.
    """

    for key, value in scope.get("headers") or ():
        if key == b"cookie":
            return cookie_parser(value.decode("latin-1")).get(name) or None
    return None


class AdminGuardMiddleware:
    """protected_prefix 아래 요청에 유효한 인증 쿠키가 없으면 401 로 끊는다.

    - 토큰이 있었지만 검증에 실패하면 쿠키도 함께 지운다.
    - 응답 본문은 실패 사유와 관계없이 동일하다.
    """

    def __init__(
        self,
        app: ASGIApp,
        secret: str,
        cookie_name: str = "auth-token",
        protected_prefix: str = DEFAULT_PROTECTED_PREFIX,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.app = app
        self._secret = secret
        self._cookie_name = cookie_name
        self._protected_prefix = protected_prefix.rstrip("/")
        self._clock = clock

    def _is_protected(self, path: str) -> bool:
        return path == self._protected_prefix or path.startswith(
            self._protected_prefix + "/"
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._is_protected(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        token = read_cookie(scope, self._cookie_name)
        if token and verify_token_edge(token, self._secret, now=self._clock()) is not None:
            await self.app(scope, receive, send)
            return

        logger.info(
            "admin request rejected by guard (path=%s token_present=%s)",
            scope.get("path"),
            bool(token),
        )
        await self._reject(send, clear_cookie=bool(token))

    async def _reject(self, send: Send, clear_cookie: bool) -> None:
        body = json.dumps({"success": False, "message": "unauthenticated"}).encode("utf-8")
        headers = [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode("latin-1")),
        ]
        if clear_cookie:
            expired = (
                f"{self._cookie_name}=; Max-Age=0; Path=/; HttpOnly; SameSite=lax"
            )
            headers.append((b"set-cookie", expired.encode("latin-1")))

        await send({"type": "http.response.start", "status": 401, "headers": headers})
        await send({"type": "http.response.body", "body": body})
