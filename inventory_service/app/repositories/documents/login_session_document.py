from __future__ import annotations

from common.mongo.types import BaseDocument, MongoDateTime

from ...models.login_session import LoginSession


class LoginSessionDocument(BaseDocument):
    """MongoDB login_sessions 컬렉션 도큐먼트 모델."""

    session_id: str
    user_id: str
    created_at: MongoDateTime
    expires_at: MongoDateTime

    @classmethod
    def from_domain(cls, session: LoginSession) -> "LoginSessionDocument":
        return cls.model_validate(session.model_dump())

    def to_domain(self) -> LoginSession:
        return LoginSession(
            session_id=self.session_id,
            user_id=self.user_id,
            created_at=self.created_at,
            expires_at=self.expires_at,
        )
