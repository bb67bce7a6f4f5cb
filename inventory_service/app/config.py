from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


INVENTORY_SERVICE_PORT = "INVENTORY_SERVICE_PORT"
SESSION_COOKIE_NAME = "SESSION_COOKIE_NAME"
SESSION_MAX_AGE_SECONDS = "SESSION_MAX_AGE_SECONDS"
SESSION_COOKIE_SECURE = "SESSION_COOKIE_SECURE"
SESSION_STORE = "SESSION_STORE"
FORECAST_PYTHON = "FORECAST_PYTHON"
FORECAST_SCRIPT_PATH = "FORECAST_SCRIPT_PATH"
FORECAST_TIMEOUT_SECONDS = "FORECAST_TIMEOUT_SECONDS"
STATIC_DIR = "STATIC_DIR"

SESSION_STORE_MEMORY = "memory"
SESSION_STORE_MONGO = "mongo"


@dataclass(slots=True)
class SessionConfig:
    """세션 쿠키 및 세션 저장소 설정."""

    cookie_name: str = "userID"
    max_age_seconds: int = 60 * 60 * 24
    cookie_secure: bool = False
    store: str = SESSION_STORE_MEMORY


@dataclass(slots=True)
class ForecastConfig:
    """예측 모델 서브프로세스 설정."""

    python: str = sys.executable
    script_path: str = "./prophet/forecastmodel.py"
    timeout_seconds: float = 300.0

    @property
    def command(self) -> list[str]:
        return [self.python, self.script_path]


@dataclass(slots=True)
class AppConfig:
    """inventory-service 전체 설정."""

    port: int
    session: SessionConfig
    forecast: ForecastConfig
    static_dir: Path | None = None


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(
            f"{name} must be an integer if set, got: {raw!r}"
        ) from exc


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_session_config() -> SessionConfig:
    max_age = _read_int(SESSION_MAX_AGE_SECONDS, 60 * 60 * 24)
    if max_age <= 0:
        raise RuntimeError(f"{SESSION_MAX_AGE_SECONDS} must be positive, got: {max_age}")

    store = (os.getenv(SESSION_STORE) or SESSION_STORE_MEMORY).strip().lower()
    if store not in {SESSION_STORE_MEMORY, SESSION_STORE_MONGO}:
        raise RuntimeError(
            f"{SESSION_STORE} must be one of 'memory', 'mongo', got: {store!r}"
        )

    return SessionConfig(
        cookie_name=os.getenv(SESSION_COOKIE_NAME) or "userID",
        max_age_seconds=max_age,
        cookie_secure=_read_bool(SESSION_COOKIE_SECURE, False),
        store=store,
    )


def load_forecast_config() -> ForecastConfig:
    timeout = _read_int(FORECAST_TIMEOUT_SECONDS, 300)
    if timeout <= 0:
        raise RuntimeError(
            f"{FORECAST_TIMEOUT_SECONDS} must be positive, got: {timeout}"
        )

    return ForecastConfig(
        python=os.getenv(FORECAST_PYTHON) or sys.executable,
        script_path=os.getenv(FORECAST_SCRIPT_PATH) or "./prophet/forecastmodel.py",
        timeout_seconds=float(timeout),
    )


def load_config() -> AppConfig:
    """inventory-service 설정을 환경 변수에서 로드하여 AppConfig 로 반환한다."""

    static_raw = (os.getenv(STATIC_DIR) or "").strip()
    return AppConfig(
        port=_read_int(INVENTORY_SERVICE_PORT, 5000),
        session=load_session_config(),
        forecast=load_forecast_config(),
        static_dir=Path(static_raw) if static_raw else None,
    )
