from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.services_service import ServicesService, get_services_service
from ..deps import require_admin
from ..schemas.common import MessageResponse, ReorderRequest, ReorderResponse
from ..schemas.services import (
    ServiceCreateRequest,
    ServiceResponse,
    ServiceUpdateRequest,
)


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[ServiceResponse], summary="서비스 전체 목록 (관리자)")
def list_services(
    service: ServicesService = Depends(get_services_service),
) -> list[ServiceResponse]:
    return [ServiceResponse.from_domain(s) for s in service.list_all()]


@router.put("/reorder", response_model=ReorderResponse, summary="서비스 순서 변경")
def reorder_services(
    body: ReorderRequest,
    service: ServicesService = Depends(get_services_service),
) -> ReorderResponse:
    return ReorderResponse(updated=service.reorder(body.ids))


@router.get("/{service_id}", response_model=ServiceResponse, summary="서비스 단건 조회 (관리자)")
def get_service(
    service_id: str,
    service: ServicesService = Depends(get_services_service),
) -> ServiceResponse:
    return ServiceResponse.from_domain(service.get(service_id))


@router.post(
    "",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="서비스 생성",
)
def create_service(
    body: ServiceCreateRequest,
    service: ServicesService = Depends(get_services_service),
) -> ServiceResponse:
    return ServiceResponse.from_domain(service.create(body.model_dump()))


@router.put("/{service_id}", response_model=ServiceResponse, summary="서비스 수정")
def update_service(
    service_id: str,
    body: ServiceUpdateRequest,
    service: ServicesService = Depends(get_services_service),
) -> ServiceResponse:
    updated = service.update(service_id, body.model_dump(exclude_unset=True))
    return ServiceResponse.from_domain(updated)


@router.delete("/{service_id}", response_model=MessageResponse, summary="서비스 삭제")
def delete_service(
    service_id: str,
    service: ServicesService = Depends(get_services_service),
) -> MessageResponse:
    service.delete(service_id)
    return MessageResponse(message="service deleted")
