from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for all inventory-service errors.

    Each subclass carries the HTTP status and the client-safe body used by
    the error boundary. The message passed to the constructor is logged only.
    """

    status_code: int = 500
    body: Any = {"error": "Server Error"}

    def to_body(self) -> Any:
        return self.body


class NotAuthenticatedError(AppError):
    """Missing, unknown or expired session on a protected route."""

    status_code = 401
    body = {"loggedIn": False}


class StoreError(AppError):
    """Failures in the data-access layer or the session store."""


class SessionDestroyError(AppError):
    """The session store could not invalidate a session on logout."""

    body = {"message": "There was an error logging out, try again"}


class ProductNotFoundError(AppError):
    """Product id is malformed or does not exist."""

    status_code = 404
    body = {"error": "Product not found"}


class ForecastError(AppError):
    """Base class for failures of the forecast model subprocess."""

    status_code = 502


class ForecastProcessError(ForecastError):
    """The model subprocess could not be started."""

    body = {"error": "Forecast model could not be started"}


class ForecastOutputError(ForecastError):
    """The model subprocess exited but its stdout is not valid JSON."""

    def __init__(self, message: str, exit_code: int | None) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def to_body(self) -> Any:
        return {
            "error": "Forecast model returned invalid output",
            "exit_code": self.exit_code,
        }


class ForecastTimeoutError(ForecastError):
    """The model subprocess did not exit within the configured timeout."""

    status_code = 504
    body = {"error": "Forecast model timed out"}
