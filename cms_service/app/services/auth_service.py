from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..config import AdminBootstrapConfig, AppConfig
from ..deps import get_app_config, get_rate_limiter, get_token_service
from ..exceptions import InvalidCredentialsError, ThrottledError, ValidationError
from ..models.user import User
from ..rate_limit import FixedWindowRateLimiter, RateLimitConfig
from ..repositories.interfaces import UserRepositoryInterface
from ..repositories.user_repository import UserRepository
from ..security.passwords import hash_password, verify_password
from ..security.tokens import TokenClaims, TokenService


logger = logging.getLogger(__name__)


class AuthService:
    """관리자 로그인/토큰 발급.

    로그인 순서:
        1) identity(클라이언트 IP) 기준 login rate limit 확인. 거절된 시도도 카운트된다.
        2) 이메일로 사용자 조회, bcrypt 해시 비교
        3) 성공 시 토큰 발급

    없는 이메일과 틀린 비밀번호는 같은 InvalidCredentialsError 로 응답한다.
    """

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        token_service: TokenService,
        rate_limiter: FixedWindowRateLimiter,
        login_limit: RateLimitConfig,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._rate_limiter = rate_limiter
        self._login_limit = login_limit

    def login(self, email: str, password: str, identity: str) -> tuple[User, str]:
        decision = self._rate_limiter.check(identity, self._login_limit)
        if not decision.allowed:
            raise ThrottledError(decision.retry_after, decision.limit)

        if not email or not password:
            raise ValidationError("email and password are required")

        user = self._user_repo.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login failed (identity=%s)", identity)
            raise InvalidCredentialsError()

        token = self._token_service.issue(user)
        logger.info("login succeeded (user_id=%s)", user.id)
        return user, token

    def current_user(self, claims: TokenClaims) -> User:
        """토큰은 유효하지만 계정이 지워졌다면 인증 실패로 본다."""

        user = self._user_repo.find_by_id(claims.user_id)
        if user is None:
            raise InvalidCredentialsError()
        return user

    def ensure_admin_user(self, bootstrap: AdminBootstrapConfig) -> User:
        existing = self._user_repo.find_by_email(bootstrap.email)
        if existing is not None:
            return existing

        now = datetime.now(timezone.utc)
        user = self._user_repo.insert(
            User(
                email=bootstrap.email,
                name=bootstrap.name,
                role="admin",
                password_hash=hash_password(bootstrap.password),
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("bootstrap admin user created (email=%s)", user.email)
        return user


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_auth_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    rate_limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    config: AppConfig = Depends(get_app_config),
) -> AuthService:
    """FastAPI DI용 AuthService 팩토리."""

    return AuthService(user_repo, token_service, rate_limiter, config.rate_limit.login)
