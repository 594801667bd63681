from __future__ import annotations

from fastapi import APIRouter, Depends

from ...services.home_service import HomeService, get_home_service
from ...services.pages_service import PagesService, get_pages_service
from ...services.projects_service import ProjectsService, get_projects_service
from ...services.services_service import ServicesService, get_services_service
from ...services.settings_service import SettingsService, get_settings_service
from ...services.team_service import TeamService, get_team_service
from ..schemas.home import HomeResponse
from ..schemas.pages import PageResponse
from ..schemas.projects import ProjectResponse
from ..schemas.services import ServiceResponse
from ..schemas.settings import SiteSettingsResponse
from ..schemas.team import TeamMemberResponse


# 인증 없이 접근 가능한 공개 API. 모두 published 레코드만 반환한다.
router = APIRouter()


@router.get(
    "/home",
    response_model=HomeResponse,
    summary="홈 화면 데이터",
    description=(
        "사이트 설정, featured 프로젝트(featured_projects_limit 개), "
        "공개 서비스 최대 6개를 한 번에 반환한다."
    ),
)
def get_home(service: HomeService = Depends(get_home_service)) -> HomeResponse:
    return HomeResponse.from_domain(service.get_home())


@router.get("/pages", response_model=list[PageResponse], summary="공개 페이지 목록")
def list_pages(service: PagesService = Depends(get_pages_service)) -> list[PageResponse]:
    return [PageResponse.from_domain(page) for page in service.list_published()]


@router.get("/pages/{slug}", response_model=PageResponse, summary="slug 로 페이지 조회")
def get_page(
    slug: str,
    service: PagesService = Depends(get_pages_service),
) -> PageResponse:
    return PageResponse.from_domain(service.get_published_by_slug(slug))


@router.get("/projects", response_model=list[ProjectResponse], summary="공개 프로젝트 목록")
def list_projects(
    service: ProjectsService = Depends(get_projects_service),
) -> list[ProjectResponse]:
    return [ProjectResponse.from_domain(p) for p in service.list_published()]


@router.get("/projects/{slug}", response_model=ProjectResponse, summary="slug 로 프로젝트 조회")
def get_project(
    slug: str,
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return ProjectResponse.from_domain(service.get_published_by_slug(slug))


@router.get("/services", response_model=list[ServiceResponse], summary="공개 서비스 목록")
def list_services(
    service: ServicesService = Depends(get_services_service),
) -> list[ServiceResponse]:
    return [ServiceResponse.from_domain(s) for s in service.list_published()]


@router.get("/services/{slug}", response_model=ServiceResponse, summary="slug 로 서비스 조회")
def get_service(
    slug: str,
    service: ServicesService = Depends(get_services_service),
) -> ServiceResponse:
    return ServiceResponse.from_domain(service.get_published_by_slug(slug))


@router.get("/team", response_model=list[TeamMemberResponse], summary="공개 팀 멤버 목록")
def list_team(service: TeamService = Depends(get_team_service)) -> list[TeamMemberResponse]:
    return [TeamMemberResponse.from_domain(m) for m in service.list_published()]


@router.get("/settings", response_model=SiteSettingsResponse, summary="사이트 설정 조회")
def get_settings(
    service: SettingsService = Depends(get_settings_service),
) -> SiteSettingsResponse:
    return SiteSettingsResponse.from_domain(service.get())
