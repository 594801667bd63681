from __future__ import annotations

from pydantic import BaseModel

from ...services.upload_service import UploadResult


class UploadResponse(BaseModel):
    success: bool = True
    file_id: str
    url: str
    filename: str
    mime_type: str
    size: int

    @classmethod
    def from_domain(cls, result: UploadResult) -> "UploadResponse":
        return cls(
            file_id=result.file_id,
            url=result.url,
            filename=result.filename,
            mime_type=result.mime_type,
            size=result.size,
        )
