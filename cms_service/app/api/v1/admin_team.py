from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.team_service import TeamService, get_team_service
from ..deps import require_admin
from ..schemas.common import MessageResponse, ReorderRequest, ReorderResponse
from ..schemas.team import (
    TeamMemberCreateRequest,
    TeamMemberResponse,
    TeamMemberUpdateRequest,
)


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[TeamMemberResponse], summary="팀 멤버 전체 목록 (관리자)")
def list_team(
    service: TeamService = Depends(get_team_service),
) -> list[TeamMemberResponse]:
    return [TeamMemberResponse.from_domain(m) for m in service.list_all()]


@router.put("/reorder", response_model=ReorderResponse, summary="팀 멤버 순서 변경")
def reorder_team(
    body: ReorderRequest,
    service: TeamService = Depends(get_team_service),
) -> ReorderResponse:
    return ReorderResponse(updated=service.reorder(body.ids))


@router.get("/{member_id}", response_model=TeamMemberResponse, summary="팀 멤버 단건 조회 (관리자)")
def get_team_member(
    member_id: str,
    service: TeamService = Depends(get_team_service),
) -> TeamMemberResponse:
    return TeamMemberResponse.from_domain(service.get(member_id))


@router.post(
    "",
    response_model=TeamMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="팀 멤버 추가",
)
def create_team_member(
    body: TeamMemberCreateRequest,
    service: TeamService = Depends(get_team_service),
) -> TeamMemberResponse:
    return TeamMemberResponse.from_domain(service.create(body.model_dump()))


@router.put("/{member_id}", response_model=TeamMemberResponse, summary="팀 멤버 수정")
def update_team_member(
    member_id: str,
    body: TeamMemberUpdateRequest,
    service: TeamService = Depends(get_team_service),
) -> TeamMemberResponse:
    member = service.update(member_id, body.model_dump(exclude_unset=True))
    return TeamMemberResponse.from_domain(member)


@router.delete("/{member_id}", response_model=MessageResponse, summary="팀 멤버 삭제")
def delete_team_member(
    member_id: str,
    service: TeamService = Depends(get_team_service),
) -> MessageResponse:
    service.delete(member_id)
    return MessageResponse(message="team member deleted")
