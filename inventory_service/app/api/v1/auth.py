from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ...config import SessionConfig
from ...services.credentials_service import (
    CredentialsService,
    get_credentials_service,
)
from ...services.session_service import SessionService, get_session_service
from ..routing import ErrorBoundaryRoute
from ..schemas.auth import LoginRequest, LoginStatusResponse, MessageResponse
from ..session_cookie import (
    clear_session_cookie,
    get_session_config,
    get_session_token,
    set_session_cookie,
)


router = APIRouter(route_class=ErrorBoundaryRoute)


@router.post("/login", response_model=bool, summary="로그인 (성공 시 세션 쿠키 발급)")
def login(
    body: LoginRequest,
    response: Response,
    previous_token: str | None = Depends(get_session_token),
    credentials: CredentialsService = Depends(get_credentials_service),
    sessions: SessionService = Depends(get_session_service),
    config: SessionConfig = Depends(get_session_config),
) -> bool:
    # bcrypt 비교가 느리므로 sync 엔드포인트로 두어 threadpool 에서 실행한다.
    result = credentials.verify(body.username, body.password)
    if not result.matched or result.user_id is None:
        return False

    session = sessions.login(result.user_id, previous_token=previous_token)
    set_session_cookie(response, session.session_id, config)
    return True


@router.get(
    "/login",
    response_model=LoginStatusResponse,
    response_model_exclude_none=True,
    summary="현재 로그인 상태 조회",
)
def check_login(
    token: str | None = Depends(get_session_token),
    sessions: SessionService = Depends(get_session_service),
) -> LoginStatusResponse:
    status = sessions.check(token)
    return LoginStatusResponse(logged_in=status.logged_in, user_id=status.user_id)


@router.post("/logout", response_model=MessageResponse, summary="로그아웃 (세션 폐기)")
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    sessions: SessionService = Depends(get_session_service),
    config: SessionConfig = Depends(get_session_config),
) -> MessageResponse:
    sessions.destroy(token)
    clear_session_cookie(response, config)
    return MessageResponse(message="Successfully Logged Out")
