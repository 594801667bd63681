from __future__ import annotations

import bcrypt


# bcrypt 는 72바이트 이후를 무시(최신 버전은 예외)하므로 입력 단계에서 막는다.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if not raw:
        raise ValueError("password must not be empty")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """비밀번호가 저장된 bcrypt 해시와 일치하는지 확인한다.

    해시가 깨져 있거나 입력이 너무 길면 예외 대신 False 를 반환한다.
    """

    raw = password.encode("utf-8")
    if not raw or len(raw) > MAX_PASSWORD_BYTES or not password_hash:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        return False
