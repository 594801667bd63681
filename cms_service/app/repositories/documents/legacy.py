from __future__ import annotations

from collections.abc import Mapping
from typing import Any


# 초기 버전 도큐먼트가 사용하던 camelCase 필드 -> 현재 필드
COMMON_FIELD_RENAMES: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "createdBy": "created_by",
    "publishStatus": "publish_status",
    "metaTitle": "meta_title",
    "metaDescription": "meta_description",
}

# 서비스/팀 도큐먼트의 예전 status(active/inactive) -> publish_status
ACTIVE_STATUS_TO_PUBLISH: dict[str, str] = {
    "active": "published",
    "inactive": "draft",
}

# 페이지는 처음부터 status 에 draft/published 를 그대로 저장했다.
PAGE_STATUS_TO_PUBLISH: dict[str, str] = {
    "draft": "draft",
    "published": "published",
}


def rename_legacy_fields(data: Any, renames: Mapping[str, str]) -> Any:
    """camelCase 필드를 현재 필드명으로 옮긴다. 현재 필드가 이미 있으면 그대로 둔다."""

    if not isinstance(data, Mapping):
        return data

    result: dict[str, Any] = dict(data)
    for old, new in {**COMMON_FIELD_RENAMES, **renames}.items():
        if old not in result:
            continue
        value = result.pop(old)
        result.setdefault(new, value)
    return result


def publish_status_from_active_flag(data: Any) -> Any:
    """publish_status 가 없고 status 가 active/inactive 인 예전 도큐먼트를 변환한다."""

    if not isinstance(data, Mapping):
        return data

    result: dict[str, Any] = dict(data)
    legacy_status = result.pop("status", None)
    if "publish_status" not in result and legacy_status in ACTIVE_STATUS_TO_PUBLISH:
        result["publish_status"] = ACTIVE_STATUS_TO_PUBLISH[legacy_status]
    return result



def publish_status_query(
    value: str, legacy_status: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """publish_status 조건을 예전 필드 형태까지 포함하는 Mongo 필터로 만든다.

    읽기 모델(_upgrade_legacy)과 같은 우선순위로 판정한다.
        publish_status > publishStatus > status(legacy_status 로 변환) > draft
    """

    legacy_status = legacy_status or {}
    no_current = {"publish_status": {"$exists": False}}
    no_camel = {**no_current, "publishStatus": {"$exists": False}}

    clauses: list[dict[str, Any]] = [
        {"publish_status": value},
        {**no_current, "publishStatus": value},
    ]
    matching = [old for old, mapped in legacy_status.items() if mapped == value]
    if matching:
        clauses.append({**no_camel, "status": {"$in": matching}})
    if value == "draft":
        # 상태 필드가 전혀 없는 도큐먼트는 기본값 draft 로 읽힌다.
        undecided: dict[str, Any] = dict(no_camel)
        if legacy_status:
            undecided["status"] = {"$nin": list(legacy_status)}
        clauses.append(undecided)
    return {"$or": clauses}
