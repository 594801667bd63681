from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status

from ...exceptions import ValidationError
from ...services.upload_service import UploadService, get_upload_service
from ..deps import get_client_identity, require_admin
from ..schemas.uploads import UploadResponse


router = APIRouter(dependencies=[Depends(require_admin)])


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="이미지 업로드",
    description=(
        "multipart/form-data 의 file 필드로 이미지를 올린다. "
        "jpeg/png/gif/webp, 최대 5MB. identity 별 upload rate limit 이 적용된다."
    ),
)
def upload_file(
    file: UploadFile | None = File(default=None),
    identity: str = Depends(get_client_identity),
    service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    if file is None:
        raise ValidationError("no file provided")

    try:
        result = service.upload(
            file.file,
            filename=file.filename or "",
            mime_type=file.content_type or "",
            identity=identity,
            declared_size=file.size,
        )
    finally:
        file.file.close()
    return UploadResponse.from_domain(result)
