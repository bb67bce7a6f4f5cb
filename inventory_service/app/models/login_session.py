from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator


class LoginSession(BaseModel):
    """쿠키 토큰과 user_id 를 묶는 로그인 세션 도메인 모델.

    - session_id 는 쿠키로만 클라이언트에 전달되는 불투명 토큰이다.
    - expires_at 이 지난 세션은 저장소에 남아 있더라도 없는 것으로 취급한다.
    """

    session_id: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    @field_validator("session_id", "user_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _validate_expiry(self) -> "LoginSession":
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be greater than created_at")
        return self

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
