from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import AppError


logger = logging.getLogger(__name__)

SERVER_ERROR_BODY = {"error": "Server Error"}


class ErrorBoundaryRoute(APIRoute):
    """모든 엔드포인트를 감싸 실패를 한 곳(error_response)으로 모으는 라우트.

    - sync/async 엔드포인트와 그 의존성에서 올라온 예외가 모두 여기로 모인다.
    - HTTPException / RequestValidationError 는 FastAPI 기본 핸들러에 맡긴다.
    - 그 외 예외는 로그만 남기고 클라이언트에는 정해진 바디만 보낸다.
    """

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        route_handler = super().get_route_handler()

        async def error_boundary_handler(request: Request) -> Response:
            try:
                return await route_handler(request)
            except (StarletteHTTPException, RequestValidationError):
                raise
            except Exception as exc:  # noqa: BLE001
                return error_response(request, exc)

        return error_boundary_handler


def error_response(request: Request, exc: Exception) -> JSONResponse:
    extra = {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
    }

    if isinstance(exc, AppError):
        status_code = exc.status_code
        body = exc.to_body()
        if status_code >= 500:
            logger.error(
                "%s: %s", type(exc).__name__, exc, exc_info=exc, extra=extra
            )
        else:
            logger.info("%s: %s", type(exc).__name__, exc, extra=extra)
        return JSONResponse(status_code=status_code, content=body)

    logger.error("unhandled error: %s", exc, exc_info=exc, extra=extra)
    return JSONResponse(status_code=500, content=SERVER_ERROR_BODY)
