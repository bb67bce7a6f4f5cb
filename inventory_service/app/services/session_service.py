from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Request

from ..exceptions import SessionDestroyError
from ..models.login_session import LoginSession
from ..repositories.interfaces import LoginSessionRepositoryInterface


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

SESSION_TOKEN_BYTES = 32


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class SessionStatus:
    logged_in: bool
    user_id: str | None = None


class SessionService:
    """쿠키 토큰 기반 로그인 세션을 발급/검증/폐기한다.

    - 토큰은 추측 불가능한 난수이며, 서버만 token -> user_id 매핑을 가진다.
    - check 는 어떤 경우에도 예외를 올리지 않고 "로그인 안 됨"으로 수렴한다.
    - 시간은 주입된 clock 으로만 읽는다.
    """

    def __init__(
        self,
        repo: LoginSessionRepositoryInterface,
        max_age: timedelta,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._max_age = max_age
        self._clock = clock

    def login(self, user_id: str, previous_token: str | None = None) -> LoginSession:
        """새 세션을 만든다. 같은 클라이언트의 이전 세션은 먼저 지운다."""

        if previous_token:
            self._repo.delete_by_session_id(previous_token)

        now = self._clock()
        session = LoginSession(
            session_id=secrets.token_urlsafe(SESSION_TOKEN_BYTES),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._max_age,
        )
        self._repo.create(session)
        logger.info("login session created for user %s", user_id)
        return session

    def check(self, token: str | None) -> SessionStatus:
        if not token:
            return SessionStatus(logged_in=False)

        try:
            session = self._repo.find_by_session_id(token)
        except Exception:  # noqa: BLE001
            logger.exception("session lookup failed, treating request as anonymous")
            return SessionStatus(logged_in=False)

        if session is None:
            return SessionStatus(logged_in=False)

        if session.is_expired(self._clock()):
            self._purge_expired(token)
            return SessionStatus(logged_in=False)

        return SessionStatus(logged_in=True, user_id=session.user_id)

    def destroy(self, token: str | None) -> None:
        """세션을 폐기한다. 이미 없는 세션이면 아무 일도 하지 않는다."""

        if not token:
            return

        try:
            deleted = self._repo.delete_by_session_id(token)
        except Exception as exc:
            raise SessionDestroyError(f"failed to destroy session: {exc}") from exc

        if deleted:
            logger.info("login session destroyed")

    def _purge_expired(self, token: str) -> None:
        try:
            self._repo.delete_by_session_id(token)
        except Exception:  # noqa: BLE001
            logger.warning("failed to purge expired session", exc_info=True)


def get_session_service(request: Request) -> SessionService:
    """앱 시작 시 만들어 app.state 에 둔 SessionService 를 돌려준다."""

    return request.app.state.session_service
