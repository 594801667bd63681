from __future__ import annotations

from fastapi import Depends, Request

from common.middleware.request_trace import resolve_client_ip

from ..config import AppConfig
from ..deps import get_app_config, get_token_service
from ..exceptions import AuthError, ForbiddenError
from ..security.tokens import TokenClaims, TokenService


def get_client_identity(request: Request) -> str:
    """rate limit 집계 단위. RequestTraceMiddleware 가 계산한 client_ip 를 우선 쓴다."""

    client_ip = getattr(request.state, "client_ip", None)
    return client_ip or resolve_client_ip(request)


def get_current_claims(
    request: Request,
    config: AppConfig = Depends(get_app_config),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """인증 쿠키의 토큰을 전체 검증기로 확인한다.

    admin guard 미들웨어는 경량 검증만 하므로, 핸들러 진입 전에 여기서 다시 검증한다.
    """

    token = request.cookies.get(config.auth.cookie_name)
    if not token:
        raise AuthError("missing token")

    claims = token_service.verify(token)
    if claims is None:
        raise AuthError("invalid token")
    return claims


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if not claims.is_admin:
        raise ForbiddenError("admin role required")
    return claims
