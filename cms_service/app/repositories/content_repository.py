from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, ReturnDocument, UpdateOne
from pymongo.database import Database

from common.mongo.types import BaseDocument, from_object_id, parse_object_id

from ..models.status import PublishStatus
from .documents.legacy import publish_status_query


ModelT = TypeVar("ModelT", bound=BaseModel)


class MongoContentRepository(Generic[ModelT]):
    """컨텐츠 컬렉션 공통 MongoDB 접근 레이어.

    컬렉션마다 collection_name / document_cls / model_cls / default_sort 만 지정한다.
    동시 수정은 마지막 쓰기가 이긴다 (버전 필드 없음).
    """

    collection_name: ClassVar[str]
    document_cls: ClassVar[type[BaseDocument]]
    model_cls: ClassVar[type[BaseModel]]
    default_sort: ClassVar[list[tuple[str, int]]] = [
        ("order", ASCENDING),
        ("created_at", DESCENDING),
    ]
    # 예전 도큐먼트의 status 값 -> publish_status (컬렉션마다 다르다)
    legacy_status_map: ClassVar[dict[str, str]] = {}

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database[self.collection_name]

    # --- helpers -----------------------------------------------------------------
    def _from_document(self, raw: dict) -> ModelT:
        document = self.document_cls.model_validate(raw)
        data = document.model_dump()
        data["id"] = from_object_id(document.id)
        return self.model_cls.model_validate(data)  # type: ignore[return-value]

    def _to_record(self, item: ModelT) -> dict[str, Any]:
        document = self.document_cls.model_validate(item.model_dump())
        return document.to_mongo_record()

    def _publish_filter(self, publish_status: PublishStatus) -> dict[str, Any]:
        return publish_status_query(publish_status.value, self.legacy_status_map)

    # --- queries -----------------------------------------------------------------
    def list(
        self,
        publish_status: PublishStatus | None = None,
        limit: int = 0,
    ) -> list[ModelT]:
        filter_doc: dict[str, Any] = {}
        if publish_status is not None:
            filter_doc.update(self._publish_filter(publish_status))

        cursor = self._col.find(filter_doc, sort=self.default_sort, limit=limit)
        return [self._from_document(raw) for raw in cursor]

    def find_by_id(self, id_value: str) -> ModelT | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None
        raw = self._col.find_one({"_id": oid})
        if not raw:
            return None
        return self._from_document(raw)

    def find_by_slug(
        self, slug: str, publish_status: PublishStatus | None = None
    ) -> ModelT | None:
        filter_doc: dict[str, Any] = {"slug": slug}
        if publish_status is not None:
            filter_doc.update(self._publish_filter(publish_status))
        raw = self._col.find_one(filter_doc)
        if not raw:
            return None
        return self._from_document(raw)

    def is_slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        filter_doc: dict[str, Any] = {"slug": slug}
        if exclude_id is not None:
            oid = parse_object_id(exclude_id)
            if oid is not None:
                filter_doc["_id"] = {"$ne": oid}
        return self._col.find_one(filter_doc, {"_id": 1}) is not None

    # --- commands ----------------------------------------------------------------
    def insert(self, item: ModelT) -> ModelT:
        now = datetime.now(timezone.utc)
        item = item.model_copy(update={"id": None, "created_at": now, "updated_at": now})

        record = self._to_record(item)
        result = self._col.insert_one(record)
        record["_id"] = result.inserted_id
        return self._from_document(record)

    def update(self, id_value: str, item: ModelT) -> ModelT | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None

        record = self._to_record(item.model_copy(update={"id": None}))
        record.pop("_id", None)
        record.pop("created_at", None)
        record["updated_at"] = datetime.now(timezone.utc)

        raw = self._col.find_one_and_update(
            {"_id": oid},
            {"$set": record},
            return_document=ReturnDocument.AFTER,
        )
        if not raw:
            return None
        return self._from_document(raw)

    def delete(self, id_value: str) -> bool:
        oid = parse_object_id(id_value)
        if oid is None:
            return False
        result = self._col.delete_one({"_id": oid})
        return result.deleted_count > 0

    def reorder(self, ids: list[str]) -> int:
        now = datetime.now(timezone.utc)
        operations = []
        for index, id_value in enumerate(ids):
            oid = parse_object_id(id_value)
            if oid is None:
                continue
            operations.append(
                UpdateOne(
                    {"_id": oid},
                    {"$set": {"order": index + 1, "updated_at": now}},
                )
            )

        if not operations:
            return 0
        result = self._col.bulk_write(operations, ordered=False)
        return result.matched_count
