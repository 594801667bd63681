from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.projects_service import ProjectsService, get_projects_service
from ..deps import require_admin
from ..schemas.common import MessageResponse, ReorderRequest, ReorderResponse
from ..schemas.projects import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
)


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get(
    "",
    response_model=list[ProjectResponse],
    summary="프로젝트 전체 목록 (관리자)",
    description="draft 를 포함한 모든 프로젝트를 order 오름차순으로 반환한다.",
)
def list_projects(
    service: ProjectsService = Depends(get_projects_service),
) -> list[ProjectResponse]:
    return [ProjectResponse.from_domain(p) for p in service.list_all()]


@router.put(
    "/reorder",
    response_model=ReorderResponse,
    summary="프로젝트 순서 변경",
    description="전달된 id 순서대로 order 를 1부터 다시 매긴다.",
)
def reorder_projects(
    body: ReorderRequest,
    service: ProjectsService = Depends(get_projects_service),
) -> ReorderResponse:
    return ReorderResponse(updated=service.reorder(body.ids))


@router.get("/{project_id}", response_model=ProjectResponse, summary="프로젝트 단건 조회 (관리자)")
def get_project(
    project_id: str,
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return ProjectResponse.from_domain(service.get(project_id))


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="프로젝트 생성",
)
def create_project(
    body: ProjectCreateRequest,
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return ProjectResponse.from_domain(service.create(body.model_dump()))


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="프로젝트 수정",
    description="stage 와 publish_status 는 서로 독립적으로 바꿀 수 있다.",
)
def update_project(
    project_id: str,
    body: ProjectUpdateRequest,
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    project = service.update(project_id, body.model_dump(exclude_unset=True))
    return ProjectResponse.from_domain(project)


@router.delete("/{project_id}", response_model=MessageResponse, summary="프로젝트 삭제")
def delete_project(
    project_id: str,
    service: ProjectsService = Depends(get_projects_service),
) -> MessageResponse:
    service.delete(project_id)
    return MessageResponse(message="project deleted")
