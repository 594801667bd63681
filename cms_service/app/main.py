from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client, get_database

from .api.health import router as health_router
from .api.v1 import api_router
from .cache import TTLCache
from .config import AppConfig, load_config
from .exceptions import (
    AuthError,
    CmsError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    StorageError,
    ThrottledError,
    ValidationError,
)
from .middleware.admin_guard import AdminGuardMiddleware
from .rate_limit import FixedWindowRateLimiter
from .repositories.user_repository import UserRepository
from .security.tokens import TokenService
from .services.auth_service import AuthService


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    """시작 시 Mongo 연결(인덱스 포함)과 관리자 계정 부트스트랩, 종료 시 연결 정리."""

    config: AppConfig = app.state.config
    db = get_database()

    if config.admin is not None:
        auth_service = AuthService(
            UserRepository(db),
            app.state.token_service,
            app.state.rate_limiter,
            config.rate_limit.login,
        )
        auth_service.ensure_admin_user(config.admin)

    try:
        yield
    finally:
        close_client()


def _error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """도메인 예외를 HTTP 응답으로 변환한다. 본문은 {"success": false, "message": ...}."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        converted = ValidationError.from_model_errors("request", list(exc.errors()))
        return _error_response(400, str(converted))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(404, str(exc) or "not found")

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        # 세부 사유(만료, 서명 불일치 등)는 로그에만 남긴다.
        logger.info("authentication failed (reason=%s path=%s)", exc.reason, request.url.path)
        if isinstance(exc, InvalidCredentialsError):
            return _error_response(401, str(exc))
        return _error_response(401, "unauthenticated")

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError) -> JSONResponse:
        return _error_response(403, "forbidden")

    @app.exception_handler(ThrottledError)
    async def handle_throttled(request: Request, exc: ThrottledError) -> JSONResponse:
        return _error_response(
            429,
            "too many requests, please try again later",
            headers={
                "Retry-After": str(exc.retry_after),
                "X-RateLimit-Limit": str(exc.limit),
                "X-RateLimit-Remaining": "0",
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("storage failure (path=%s): %s", request.url.path, exc)
        return _error_response(500, "internal server error")

    @app.exception_handler(PyMongoError)
    async def handle_mongo_error(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error(
            "database failure (path=%s)",
            request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return _error_response(500, "internal server error")

    @app.exception_handler(CmsError)
    async def handle_cms_error(request: Request, exc: CmsError) -> JSONResponse:
        logger.error("unhandled cms error (path=%s): %s", request.url.path, exc)
        return _error_response(500, "internal server error")


def create_app(config: AppConfig | None = None) -> FastAPI:
    setup_logger(name="cms-service")
    config = config or load_config()

    app = FastAPI(
        title="CMS Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 프로세스 단위 공유 객체. 요청 핸들러는 deps.get_* 로 꺼내 쓴다.
    app.state.config = config
    app.state.cache = TTLCache()
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_tracked_identities=config.rate_limit.max_tracked_identities,
    )
    app.state.token_service = TokenService(
        config.auth.jwt_secret,
        config.auth.token_ttl_seconds,
    )

    # 나중에 추가한 미들웨어가 바깥쪽에서 실행된다: RequestTrace -> AdminGuard -> 라우터
    app.add_middleware(
        AdminGuardMiddleware,
        secret=config.auth.jwt_secret,
        cookie_name=config.auth.cookie_name,
    )
    app.add_middleware(RequestTraceMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def main() -> None:
    """명령행에서 실행할 수 있도록 uvicorn 런처를 제공한다."""

    import uvicorn

    port = load_config().port
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
