from __future__ import annotations

from fastapi import APIRouter, Depends

from ...security.tokens import TokenClaims
from ...services.settings_service import SettingsService, get_settings_service
from ..deps import require_admin
from ..schemas.settings import SiteSettingsResponse, SiteSettingsUpdateRequest


router = APIRouter()


@router.get("", response_model=SiteSettingsResponse, summary="사이트 설정 조회 (관리자)")
def get_settings(
    _: TokenClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
) -> SiteSettingsResponse:
    return SiteSettingsResponse.from_domain(service.get())


@router.put(
    "",
    response_model=SiteSettingsResponse,
    summary="사이트 설정 수정",
    description="보낸 필드만 덮어쓴다. featured_projects_limit 는 1~12 범위여야 한다.",
)
def update_settings(
    body: SiteSettingsUpdateRequest,
    claims: TokenClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
) -> SiteSettingsResponse:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    settings = service.update(changes, updated_by=claims.email)
    return SiteSettingsResponse.from_domain(settings)
