from __future__ import annotations

from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..exceptions import StoreError
from ..models.login_session import LoginSession
from .documents.login_session_document import LoginSessionDocument
from .interfaces import LoginSessionRepositoryInterface


class LoginSessionRepository(LoginSessionRepositoryInterface):
    """login_sessions 컬렉션에 대한 MongoDB 접근 레이어.

    세션 하나는 도큐먼트 하나이므로 단일 도큐먼트 연산만으로 키 단위 원자성이 보장된다.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["login_sessions"]

    def create(self, session: LoginSession) -> LoginSession:
        payload = LoginSessionDocument.from_domain(session).to_mongo_record()
        try:
            self._col.insert_one(payload)
        except PyMongoError as exc:
            raise StoreError(f"failed to create login session: {exc}") from exc
        return session

    def find_by_session_id(self, session_id: str) -> LoginSession | None:
        try:
            raw = self._col.find_one({"session_id": session_id})
        except PyMongoError as exc:
            raise StoreError(f"failed to read login session: {exc}") from exc
        if not raw:
            return None

        try:
            return LoginSessionDocument.model_validate(raw).to_domain()
        except ValidationError as exc:
            raise StoreError(f"corrupt login session document: {exc}") from exc

    def delete_by_session_id(self, session_id: str) -> bool:
        try:
            result = self._col.delete_one({"session_id": session_id})
        except PyMongoError as exc:
            raise StoreError(f"failed to delete login session: {exc}") from exc
        return result.deleted_count > 0
