from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ...services.upload_service import UploadService, get_upload_service


router = APIRouter()

# 업로드된 파일은 수정되지 않으므로 길게 캐시해도 된다.
FILE_CACHE_CONTROL = "public, max-age=31536000, immutable"


@router.get(
    "/{file_id}",
    summary="업로드 파일 조회",
    responses={200: {"content": {"image/*": {}}}},
)
def get_file(
    file_id: str,
    service: UploadService = Depends(get_upload_service),
) -> Response:
    blob = service.get_file(file_id)
    return Response(
        content=blob.data,
        media_type=blob.mime_type,
        headers={
            "Cache-Control": FILE_CACHE_CONTROL,
            "Content-Length": str(blob.length),
        },
    )
