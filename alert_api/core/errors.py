"""
Error types and their HTTP rendering.

Clients always receive human-readable JSON bodies of the form
`{"error": ..., "message": ...}`, plus any extra detail fields.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AlertAPIError(Exception):
    """An error surfaced to the HTTP caller with a given status code."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: Optional[str] = None,
        **details: Any,
    ) -> None:
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message is not None:
            payload["message"] = self.message
        payload.update(self.details)
        return payload


class DatabaseUnavailableError(RuntimeError):
    """The database could not be reached during startup."""


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application."""

    @app.exception_handler(AlertAPIError)
    async def alert_api_error_handler(request: Request, exc: AlertAPIError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(exc)},
        )
