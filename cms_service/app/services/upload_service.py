from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from fastapi import Depends

from ..blob_store import BlobStore, StoredBlob
from ..config import AppConfig
from ..deps import get_app_config, get_blob_store, get_rate_limiter
from ..exceptions import NotFoundError, ThrottledError
from ..rate_limit import FixedWindowRateLimiter, RateLimitConfig


logger = logging.getLogger(__name__)

FILES_URL_PREFIX = "/api/v1/files"


@dataclass(frozen=True, slots=True)
class UploadResult:
    file_id: str
    url: str
    filename: str
    mime_type: str
    size: int


class UploadService:
    """이미지 업로드/다운로드. 업로드는 identity 별 upload rate limit 을 따른다."""

    def __init__(
        self,
        blob_store: BlobStore,
        rate_limiter: FixedWindowRateLimiter,
        upload_limit: RateLimitConfig,
    ) -> None:
        self._blob_store = blob_store
        self._rate_limiter = rate_limiter
        self._upload_limit = upload_limit

    def _check_rate_limit(self, identity: str) -> None:
        decision = self._rate_limiter.check(identity, self._upload_limit)
        if not decision.allowed:
            raise ThrottledError(decision.retry_after, decision.limit)

    def upload(
        self,
        stream: BinaryIO,
        filename: str,
        mime_type: str,
        identity: str,
        declared_size: int | None = None,
    ) -> UploadResult:
        """스트림에서 최대 max_size_bytes + 1 바이트만 읽어 저장한다.

        클라이언트가 알려준 크기가 있으면 읽기 전에 먼저 검사한다.
        """

        self._check_rate_limit(identity)
        if declared_size is not None:
            self._blob_store.validate(filename, mime_type, declared_size)

        data = stream.read(self._blob_store.max_size_bytes + 1)
        return self._store(data, filename, mime_type)

    def _store(self, data: bytes, filename: str, mime_type: str) -> UploadResult:
        file_id = self._blob_store.store(data, filename, mime_type)
        return UploadResult(
            file_id=file_id,
            url=f"{FILES_URL_PREFIX}/{file_id}",
            filename=filename,
            mime_type=mime_type.lower(),
            size=len(data),
        )

    def get_file(self, file_id: str) -> StoredBlob:
        blob = self._blob_store.retrieve(file_id)
        if blob is None:
            raise NotFoundError("file not found")
        return blob


def get_upload_service(
    blob_store: BlobStore = Depends(get_blob_store),
    rate_limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    config: AppConfig = Depends(get_app_config),
) -> UploadService:
    """FastAPI DI용 UploadService 팩토리."""

    return UploadService(blob_store, rate_limiter, config.rate_limit.upload)
