from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..cache import TTLCache
from ..config import AppConfig
from ..deps import get_app_config, get_cache
from ..models.team_member import TeamMember
from ..repositories.interfaces import TeamRepositoryInterface
from ..repositories.team_repository import TeamRepository
from .content_service import ContentService


class TeamService(ContentService[TeamMember]):
    """팀 멤버 조회/관리."""

    collection = "team"
    item_key = "team-member"
    label = "team member"
    model_cls = TeamMember


def get_team_repository(
    db: Database = Depends(get_database),
) -> TeamRepositoryInterface:
    """FastAPI DI용 TeamRepository 팩토리."""

    return TeamRepository(db)


def get_team_service(
    repo: TeamRepositoryInterface = Depends(get_team_repository),
    cache: TTLCache = Depends(get_cache),
    config: AppConfig = Depends(get_app_config),
) -> TeamService:
    """FastAPI DI용 TeamService 팩토리."""

    return TeamService(repo, cache, config.cache.ttl_for("team"))
