from __future__ import annotations

from pydantic import BaseModel, Field


class ReorderRequest(BaseModel):
    """관리자 화면에서 정렬한 순서대로의 id 목록. order 는 1부터 다시 매긴다."""

    ids: list[str] = Field(min_length=1)


class ReorderResponse(BaseModel):
    updated: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str
