from __future__ import annotations

from typing import Any


class CmsError(Exception):
    """Base exception for all cms-service errors."""


class ValidationError(CmsError):
    """Client input was rejected (bad upload, duplicated slug, malformed id)."""

    @classmethod
    def from_model_errors(cls, label: str, errors: list[dict[str, Any]]) -> "ValidationError":
        """pydantic 검증 오류 목록 중 첫 번째를 사람이 읽을 메시지로 바꾼다."""

        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or "body"
        return cls(f"invalid {label} field {field!r}: {first.get('msg', 'invalid value')}")


class SlugConflictError(ValidationError):
    """Another record in the same collection already uses the slug."""

    def __init__(self, collection: str, slug: str) -> None:
        super().__init__(f"a {collection} record with slug {slug!r} already exists")
        self.collection = collection
        self.slug = slug


class NotFoundError(CmsError):
    """Lookup by id/slug found nothing."""


class AuthError(CmsError):
    """Missing, malformed, expired or forged credentials.

    The reason is only kept for server-side logs, clients always see the same
    "unauthenticated" answer.
    """

    def __init__(self, reason: str = "unauthenticated") -> None:
        super().__init__(reason)
        self.reason = reason


class ForbiddenError(CmsError):
    """Authenticated, but the role may not perform the action."""


class ThrottledError(CmsError):
    """Rate limit exceeded for the caller's identity."""

    def __init__(self, retry_after: int, limit: int) -> None:
        super().__init__(f"rate limit exceeded, retry after {retry_after}s")
        self.retry_after = retry_after
        self.limit = limit


class StorageError(CmsError):
    """Underlying data-store or blob-store operation failed."""


class InvalidCredentialsError(AuthError):
    """Login failed. Unknown email and wrong password share this one error."""

    def __init__(self) -> None:
        super().__init__("invalid credentials")
