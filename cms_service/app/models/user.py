from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from common.types import ObjectIdStr


class User(BaseModel):
    """관리자 계정 도메인 모델.

    password_hash 는 저장소와 인증 서비스 사이에서만 쓰이고 API 응답으로 나가지 않는다.
    """

    id: ObjectIdStr | None = None
    email: str
    name: str
    role: str = "admin"
    password_hash: str = Field(default="", repr=False)
    created_at: datetime
    updated_at: datetime
