from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.pages_service import PagesService, get_pages_service
from ..deps import require_admin
from ..schemas.common import MessageResponse
from ..schemas.pages import PageCreateRequest, PageResponse, PageUpdateRequest


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get(
    "",
    response_model=list[PageResponse],
    summary="페이지 전체 목록 (관리자)",
    description="draft 를 포함한 모든 페이지를 최신순으로 반환한다.",
)
def list_pages(
    service: PagesService = Depends(get_pages_service),
) -> list[PageResponse]:
    return [PageResponse.from_domain(page) for page in service.list_all()]


@router.get("/{page_id}", response_model=PageResponse, summary="페이지 단건 조회 (관리자)")
def get_page(
    page_id: str,
    service: PagesService = Depends(get_pages_service),
) -> PageResponse:
    return PageResponse.from_domain(service.get(page_id))


@router.post(
    "",
    response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="페이지 생성",
)
def create_page(
    body: PageCreateRequest,
    service: PagesService = Depends(get_pages_service),
) -> PageResponse:
    return PageResponse.from_domain(service.create(body.model_dump()))


@router.put("/{page_id}", response_model=PageResponse, summary="페이지 수정")
def update_page(
    page_id: str,
    body: PageUpdateRequest,
    service: PagesService = Depends(get_pages_service),
) -> PageResponse:
    page = service.update(page_id, body.model_dump(exclude_unset=True))
    return PageResponse.from_domain(page)


@router.delete("/{page_id}", response_model=MessageResponse, summary="페이지 삭제")
def delete_page(
    page_id: str,
    service: PagesService = Depends(get_pages_service),
) -> MessageResponse:
    service.delete(page_id)
    return MessageResponse(message="page deleted")
