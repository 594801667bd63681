from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import BeforeValidator


def serialize_datetime_to_utc_iso8601(value: datetime) -> str:
    """모든 datetime을 UTC 기준 ISO8601(+타임존) 문자열로 직렬화한다."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


def _to_object_id_str(value: Any) -> Any:
    # None 이나 문자열은 그대로, ObjectId 등은 str() 로 변환한다.
    if value is None or isinstance(value, str):
        return value
    return str(value)


UtcDateTime = Annotated[
    datetime,
    PlainSerializer(
        serialize_datetime_to_utc_iso8601,
        return_type=str,
        when_used="json",
    ),
]

ObjectIdStr = Annotated[str, BeforeValidator(_to_object_id_str)]
