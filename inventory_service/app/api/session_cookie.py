from __future__ import annotations

from fastapi import Depends, Request, Response

from ..config import SessionConfig
from ..exceptions import NotAuthenticatedError
from ..services.session_service import SessionService, get_session_service


def get_session_config(request: Request) -> SessionConfig:
    return request.app.state.config.session


def get_session_token(
    request: Request,
    config: SessionConfig = Depends(get_session_config),
) -> str | None:
    return request.cookies.get(config.cookie_name) or None


def set_session_cookie(response: Response, token: str, config: SessionConfig) -> None:
    response.set_cookie(
        key=config.cookie_name,
        value=token,
        max_age=config.max_age_seconds,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, config: SessionConfig) -> None:
    response.delete_cookie(
        key=config.cookie_name,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
        path="/",
    )


def require_user_id(
    token: str | None = Depends(get_session_token),
    sessions: SessionService = Depends(get_session_service),
) -> str:
    """보호된 엔드포인트용 의존성. 유효한 세션의 user_id 를 돌려준다."""

    status = sessions.check(token)
    if not status.logged_in or status.user_id is None:
        raise NotAuthenticatedError("valid session required")
    return status.user_id
