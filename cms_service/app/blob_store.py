from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from gridfs import GridFSBucket
from gridfs.errors import NoFile
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.mongo.types import parse_object_id

from .exceptions import StorageError, ValidationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredBlob:
    id: str
    filename: str
    mime_type: str
    length: int
    data: bytes


class BlobBucket(Protocol):
    """GridFSBucket 중 BlobStore 가 사용하는 부분."""

    def upload_from_stream(
        self,
        filename: str,
        source: Any,
        chunk_size_bytes: int | None = None,
        metadata: dict | None = None,
    ) -> Any:  # pragma: no cover - Protocol
        ...

    def open_download_stream(self, file_id: Any) -> Any:  # pragma: no cover - Protocol
        ...


class BlobStore:
    """업로드 파일을 GridFS 청크로 저장하고 id 로 다시 읽는다.

    - store 는 라우터에서 이미 검사했더라도 MIME 허용 목록과 크기 상한을 다시 검사하고,
      검사를 통과하기 전에는 아무것도 쓰지 않는다.
    - retrieve 는 모르는 id(형식이 틀린 id 포함)에 대해 None 을 반환한다.
    - 저장소 자체의 실패는 StorageError 로 감싸 "잘못된 파일" 과 구분한다.
    - 삭제/수정은 지원하지 않는다. 참조가 끊긴 파일은 그대로 남는다.
    """

    def __init__(
        self,
        bucket: BlobBucket,
        allowed_mime_types: Iterable[str],
        max_size_bytes: int,
        chunk_size_bytes: int = 255 * 1024,
    ) -> None:
        self._bucket = bucket
        self._allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)
        self._max_size_bytes = max_size_bytes
        self._chunk_size_bytes = chunk_size_bytes

    @classmethod
    def from_database(
        cls,
        database: Database,
        bucket_name: str,
        allowed_mime_types: Iterable[str],
        max_size_bytes: int,
        chunk_size_bytes: int,
    ) -> "BlobStore":
        bucket = GridFSBucket(
            database,
            bucket_name=bucket_name,
            chunk_size_bytes=chunk_size_bytes,
        )
        return cls(
            bucket,
            allowed_mime_types=allowed_mime_types,
            max_size_bytes=max_size_bytes,
            chunk_size_bytes=chunk_size_bytes,
        )

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    def is_allowed_mime_type(self, mime_type: str | None) -> bool:
        return bool(mime_type) and mime_type.lower() in self._allowed_mime_types

    def validate(
        self,
        filename: str,
        mime_type: str | None,
        size: int,
    ) -> None:
        if not filename or not filename.strip():
            raise ValidationError("file name is required")
        if not self.is_allowed_mime_type(mime_type):
            raise ValidationError(
                "invalid file type, only images are allowed "
                f"({', '.join(sorted(self._allowed_mime_types))})"
            )
        if size <= 0:
            raise ValidationError("file is empty")
        if size > self._max_size_bytes:
            raise ValidationError(
                f"file too large, max size is {self._max_size_bytes // (1024 * 1024)}MB"
            )

    def store(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        declared_length: int | None = None,
    ) -> str:
        if declared_length is not None and declared_length != len(data):
            raise ValidationError(
                f"declared length {declared_length} does not match payload length {len(data)}"
            )
        self.validate(filename, mime_type, len(data))

        try:
            file_id = self._bucket.upload_from_stream(
                filename,
                data,
                chunk_size_bytes=self._chunk_size_bytes,
                metadata={
                    "content_type": mime_type.lower(),
                    "original_name": filename,
                    "length": len(data),
                },
            )
        except PyMongoError as exc:
            logger.exception("failed to store blob (filename=%s)", filename)
            raise StorageError("failed to store file") from exc

        logger.info(
            "stored blob (id=%s filename=%s size=%d)", file_id, filename, len(data)
        )
        return str(file_id)

    def retrieve(self, blob_id: str) -> StoredBlob | None:
        oid = parse_object_id(blob_id)
        if oid is None:
            return None

        try:
            stream = self._bucket.open_download_stream(oid)
        except NoFile:
            return None
        except PyMongoError as exc:
            logger.exception("failed to open blob (id=%s)", blob_id)
            raise StorageError("failed to read file") from exc

        try:
            metadata = stream.metadata or {}
            filename = stream.filename or ""
            stored_length = stream.length
            data = stream.read()
        except PyMongoError as exc:
            logger.exception("failed to read blob chunks (id=%s)", blob_id)
            raise StorageError("failed to read file") from exc
        finally:
            stream.close()

        if len(data) != stored_length:
            logger.error(
                "blob length mismatch (id=%s stored=%d read=%d)",
                blob_id,
                stored_length,
                len(data),
            )
            raise StorageError("stored file is incomplete")

        return StoredBlob(
            id=str(oid),
            filename=filename,
            mime_type=metadata.get("content_type") or "application/octet-stream",
            length=len(data),
            data=data,
        )
