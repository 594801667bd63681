from __future__ import annotations

from ..models.team_member import TeamMember
from .content_repository import MongoContentRepository
from .documents.legacy import ACTIVE_STATUS_TO_PUBLISH
from .documents.team_member_document import TeamMemberDocument
from .interfaces import TeamRepositoryInterface


class TeamRepository(MongoContentRepository[TeamMember], TeamRepositoryInterface):
    """team 컬렉션에 대한 MongoDB 접근 레이어."""

    collection_name = "team"
    document_cls = TeamMemberDocument
    model_cls = TeamMember
    legacy_status_map = ACTIVE_STATUS_TO_PUBLISH
