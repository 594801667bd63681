from __future__ import annotations

from typing import Any

from pydantic import model_validator

from common.mongo.types import BaseDocument, from_object_id

from ...models.user import User
from .legacy import rename_legacy_fields


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델."""

    email: str
    name: str
    role: str = "admin"
    password_hash: str

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        # 예전 계정은 해시를 password 필드에 저장했다.
        return rename_legacy_fields(data, {"password": "password_hash"})

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        return cls.model_validate(user.model_dump())

    def to_domain(self) -> User:
        return User(
            id=from_object_id(self.id),
            email=self.email,
            name=self.name,
            role=self.role,
            password_hash=self.password_hash,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
