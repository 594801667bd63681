from __future__ import annotations

from pydantic import BaseModel

from ...models.user import User


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """로그인 사용자 정보. password_hash 는 포함하지 않는다."""

    id: str | None
    email: str
    name: str
    role: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name, role=user.role)


class LoginResponse(BaseModel):
    success: bool = True
    user: UserResponse
