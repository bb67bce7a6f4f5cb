from __future__ import annotations

import threading

from ..models.login_session import LoginSession
from .interfaces import LoginSessionRepositoryInterface


class InMemoryLoginSessionRepository(LoginSessionRepositoryInterface):
    """프로세스 메모리에 세션을 보관하는 기본 세션 저장소.

    - 서버 재시작 시 모든 세션이 사라진다.
    - 모든 연산은 단일 dict 조작이며 lock 안에서 수행된다.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, LoginSession] = {}
        self._lock = threading.Lock()

    def create(self, session: LoginSession) -> LoginSession:
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def find_by_session_id(self, session_id: str) -> LoginSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def delete_by_session_id(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
