from __future__ import annotations

from datetime import datetime, timezone

from pymongo.database import Database

from common.mongo.types import parse_object_id

from ..models.user import User
from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        return UserDocument.model_validate(doc).to_domain()

    def find_by_email(self, email: str) -> User | None:
        doc = self._col.find_one({"email": email.strip().lower()})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_id(self, id_value: str) -> User | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None
        doc = self._col.find_one({"_id": oid})
        if not doc:
            return None
        return self._from_document(doc)

    def insert(self, user: User) -> User:
        now = datetime.now(timezone.utc)
        user = user.model_copy(
            update={
                "id": None,
                "email": user.email.strip().lower(),
                "created_at": now,
                "updated_at": now,
            }
        )

        payload = UserDocument.from_domain(user).to_mongo_record()
        result = self._col.insert_one(payload)
        payload["_id"] = result.inserted_id
        return self._from_document(payload)
