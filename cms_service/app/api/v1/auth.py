from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ...config import AppConfig
from ...deps import get_app_config
from ...security.tokens import TokenClaims
from ...services.auth_service import AuthService, get_auth_service
from ..deps import get_client_identity, get_current_claims
from ..schemas.auth import LoginRequest, LoginResponse, UserResponse
from ..schemas.common import MessageResponse


router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="관리자 로그인",
    description=(
        "이메일/비밀번호를 확인하고 httpOnly 인증 쿠키를 설정한다. "
        "클라이언트 IP 별 login rate limit 이 적용된다."
    ),
)
def login(
    body: LoginRequest,
    response: Response,
    identity: str = Depends(get_client_identity),
    config: AppConfig = Depends(get_app_config),
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    user, token = service.login(body.email, body.password, identity)

    response.set_cookie(
        key=config.auth.cookie_name,
        value=token,
        max_age=config.auth.token_ttl_seconds,
        httponly=True,
        secure=config.auth.cookie_secure,
        samesite="lax",
        path="/",
    )
    return LoginResponse(user=UserResponse.from_domain(user))


@router.post("/logout", response_model=MessageResponse, summary="로그아웃")
def logout(
    response: Response,
    config: AppConfig = Depends(get_app_config),
) -> MessageResponse:
    response.delete_cookie(
        key=config.auth.cookie_name,
        path="/",
        httponly=True,
        secure=config.auth.cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="logged out")


@router.get("/me", response_model=UserResponse, summary="현재 로그인 사용자")
def me(
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return UserResponse.from_domain(service.current_user(claims))
