from __future__ import annotations

from pydantic import BaseModel


class Credentials(BaseModel):
    """users 컬렉션에 저장된 로그인 정보. 이 서비스에서는 읽기 전용이다."""

    user_id: str
    username: str
    password_hash: str
