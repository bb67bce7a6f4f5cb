from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client, get_database

from .api.health import router as health_router
from .api.static_files import HtmlFallbackStaticFiles
from .api.v1 import api_router
from .config import SESSION_STORE_MONGO, AppConfig, SessionConfig, load_config
from .repositories.interfaces import LoginSessionRepositoryInterface
from .repositories.login_session_repository import LoginSessionRepository
from .repositories.memory_session_repository import InMemoryLoginSessionRepository
from .services.session_service import Clock, SessionService, utc_now


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # pragma: no cover - framework hook
    config: AppConfig = app.state.config
    logger.info(
        "inventory-service starting up",
        extra={"session_store": config.session.store},
    )
    try:
        yield
    finally:
        close_client()
        logger.info("inventory-service stopped")


def build_session_repository(config: SessionConfig) -> LoginSessionRepositoryInterface:
    """설정에 맞는 세션 저장소를 만든다. mongo 는 이 시점에 연결을 확인한다."""

    if config.store == SESSION_STORE_MONGO:
        return LoginSessionRepository(get_database())
    return InMemoryLoginSessionRepository()


def create_app(
    config: AppConfig | None = None,
    session_repository: LoginSessionRepositoryInterface | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    setup_logger(name="inventory-service")
    config = config or load_config()

    app = FastAPI(
        title="Inventory Forecast Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 세션 저장소는 앱이 소유하며 앱 생성 시 한 번만 만든다.
    app.state.config = config
    if session_repository is None:
        session_repository = build_session_repository(config.session)
    app.state.session_service = SessionService(
        session_repository,
        max_age=timedelta(seconds=config.session.max_age_seconds),
        clock=clock,
    )

    # 공통 Request/Span ID 로그 미들웨어
    app.add_middleware(RequestTraceMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    # 정적 클라이언트는 API 라우트 뒤에 마운트해야 API 경로를 가리지 않는다.
    if config.static_dir is not None:
        if config.static_dir.is_dir():
            app.mount(
                "/",
                HtmlFallbackStaticFiles(config.static_dir),
                name="client",
            )
        else:
            logger.warning("STATIC_DIR %s is not a directory, skipping", config.static_dir)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    port = app.state.config.port
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
