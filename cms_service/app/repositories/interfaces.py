from __future__ import annotations

from typing import Protocol, TypeVar

from ..models.page import Page
from ..models.project import Project
from ..models.service import Service
from ..models.settings import SiteSettings
from ..models.status import PublishStatus
from ..models.team_member import TeamMember
from ..models.user import User


ModelT = TypeVar("ModelT")


class ContentRepositoryInterface(Protocol[ModelT]):
    """컨텐츠 컬렉션(pages/projects/services/team)이 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    id 형식이 잘못된 경우도 "없음" 으로 취급한다.
    """

    def list(
        self,
        publish_status: PublishStatus | None = None,
        limit: int = 0,
    ) -> list[ModelT]:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, id_value: str) -> ModelT | None:  # pragma: no cover - Protocol
        ...

    def find_by_slug(
        self, slug: str, publish_status: PublishStatus | None = None
    ) -> ModelT | None:  # pragma: no cover - Protocol
        ...

    def is_slug_taken(
        self, slug: str, exclude_id: str | None = None
    ) -> bool:  # pragma: no cover - Protocol
        ...

    def insert(self, item: ModelT) -> ModelT:  # pragma: no cover - Protocol
        ...

    def update(
        self, id_value: str, item: ModelT
    ) -> ModelT | None:  # pragma: no cover - Protocol
        """created_at 을 제외한 필드를 덮어쓴다 (last-write-wins)."""
        ...

    def delete(self, id_value: str) -> bool:  # pragma: no cover - Protocol
        ...

    def reorder(self, ids: list[str]) -> int:  # pragma: no cover - Protocol
        """ids 순서대로 order 를 1부터 다시 매기고, 갱신된 개수를 반환한다."""
        ...


class PageRepositoryInterface(ContentRepositoryInterface[Page], Protocol):
    pass


class ProjectRepositoryInterface(ContentRepositoryInterface[Project], Protocol):
    def list_featured(self, limit: int) -> list[Project]:  # pragma: no cover - Protocol
        """공개된 featured 프로젝트를 order 오름차순, updated_at 내림차순으로 반환한다."""
        ...


class ServiceRepositoryInterface(ContentRepositoryInterface[Service], Protocol):
    pass


class TeamRepositoryInterface(ContentRepositoryInterface[TeamMember], Protocol):
    pass


class UserRepositoryInterface(Protocol):
    def find_by_email(self, email: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, id_value: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def insert(self, user: User) -> User:  # pragma: no cover - Protocol
        ...


class SettingsRepositoryInterface(Protocol):
    def get(self) -> SiteSettings | None:  # pragma: no cover - Protocol
        ...

    def save(self, settings: SiteSettings) -> SiteSettings:  # pragma: no cover - Protocol
        ...
