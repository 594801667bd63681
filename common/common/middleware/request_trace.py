import json
import logging
import time
import uuid
from urllib.parse import parse_qs

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"
FORWARDED_FOR_HEADER = "X-Forwarded-For"

# 노이즈를 줄이기 위해 로그에서 제외할 엔드포인트 경로 목록
IGNORED_LOG_PATHS: set[str] = {"/health"}

# 로그에 원문이 남으면 안 되는 JSON 바디 필드
SENSITIVE_BODY_FIELDS: frozenset[str] = frozenset(
    {"password", "password_hash", "token", "secret"}
)
MASKED_VALUE = "***"
MAX_LOGGED_BODY_LENGTH = 1024


def resolve_client_ip(request: Request) -> str:
    """요청자의 IP 를 결정한다.

    프록시 뒤에서 동작하므로 X-Forwarded-For 의 첫 번째 값을 우선 사용하고,
    없으면 소켓 peer 주소, 그것도 없으면 "unknown" 을 반환한다.
    """

    forwarded = request.headers.get(FORWARDED_FOR_HEADER)
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


def mask_sensitive_body(text: str) -> str:
    """JSON 바디에서 비밀번호 등 민감 필드를 마스킹한다.

    JSON 이 아니면(multipart 업로드 등) 원문 대신 길이만 남긴다.
    """

    try:
        data = json.loads(text)
    except ValueError:
        return f"<{len(text)} chars>"

    if isinstance(data, dict):
        for key in list(data):
            if key.lower() in SENSITIVE_BODY_FIELDS:
                data[key] = MASKED_VALUE
    return json.dumps(data, ensure_ascii=False)


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """공통 Request/Span ID 로그 미들웨어.

    - 들어오는 요청에서 X-Request-Id, X-Span-Id 를 읽고, 없으면 request_id만 새로 생성한다.
    - request.state 에 request_id, span_id, client_ip 를 저장한다.
    - 응답 헤더에 동일한 ID 를 설정한다.
    - 민감 필드를 가린 바디 스니펫과 함께 inbound/outbound 로그를 남긴다.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id, span_id = self._extract_trace_ids(request)

        request.state.request_id = request_id
        request.state.span_id = span_id
        request.state.client_ip = resolve_client_ip(request)

        raw_body: str | None = None
        content_type = request.headers.get("content-type", "")
        if request.method in {"POST", "PUT", "PATCH"} and content_type.startswith(
            "application/json"
        ):
            body_bytes = await request.body()
            if body_bytes:
                text = body_bytes.decode("utf-8", errors="replace")
                raw_body = mask_sensitive_body(text)[:MAX_LOGGED_BODY_LENGTH]

        request.state.request_body = raw_body

        should_log = request.url.path not in IGNORED_LOG_PATHS

        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                duration = time.monotonic() - start
                self._logger.exception(
                    "request failed",
                    extra=self._build_log_extra(request, duration=duration),
                )
            raise

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        response.headers.setdefault(SPAN_ID_HEADER, span_id)

        if should_log:
            duration = time.monotonic() - start
            self._logger.info(
                "completed request",
                extra=self._build_log_extra(
                    request,
                    status=response.status_code,
                    duration=duration,
                ),
            )

        return response

    def _extract_trace_ids(self, request: Request) -> tuple[str, str]:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        span_id = request.headers.get(SPAN_ID_HEADER) or "0"
        return request_id, span_id

    def _build_log_extra(
        self,
        request: Request,
        status: int | None = None,
        duration: float | None = None,
    ) -> dict[str, object]:
        extra: dict[str, object] = {
            "request_id": request.state.request_id,
            "span_id": request.state.span_id,
            "client_ip": request.state.client_ip,
            "method": request.method,
            "path": request.url.path,
        }

        query = request.url.query
        if query:
            parsed = parse_qs(query, keep_blank_values=True)
            if parsed:
                extra["query_params"] = {
                    key: values[0] if len(values) == 1 else values
                    for key, values in parsed.items()
                }

        body = getattr(request.state, "request_body", None)
        if body:
            extra["body"] = body

        if status is not None:
            extra["status"] = status

        if duration is not None:
            extra["duration"] = f"{duration * 1000:.3f}ms"

        return extra
