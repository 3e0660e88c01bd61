"""Global exception handlers.

Every failure leaves the service as a JSON object with a single `error`
string: 400 for invalid input and duplicate submissions, the routing status
for unknown paths and methods, 500 for store and unexpected failures. Store
messages are surfaced as-is; the only clients are the trusted survey front
ends.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from survey_api.logic.errors import SurveyError

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _format_location(loc: Any) -> str:
    parts = [str(p) for p in (loc or ()) if p != "body"]
    return ".".join(parts)


def format_validation_errors(errors: list[dict]) -> str:
    """Flatten pydantic error entries into one readable line."""
    messages: list[str] = []
    for err in errors:
        where = _format_location(err.get("loc"))
        msg = str(err.get("msg") or "invalid value")
        messages.append(f"{where}: {msg}" if where else msg)
    return "; ".join(messages) or "invalid request body"


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    response = error_response(detail, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_errors(list(exc.errors()))
    logger.info("request_validation_failed path=%s error=%s", request.url.path, message)
    return error_response(message, 400)


async def handle_survey_error(request: Request, exc: SurveyError) -> JSONResponse:
    return error_response(exc.message, exc.status_code)


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # DBAPI errors wrap the driver exception; its text is the useful part
    underlying = getattr(exc, "orig", None) or exc
    logger.error("store_error path=%s", request.url.path, exc_info=exc)
    return error_response(str(underlying), 500)


class UnexpectedErrorMiddleware:
    """Turn exceptions no handler claimed into a 500 JSON error.

    Registered innermost so the request-id and CORS middleware still decorate
    the response. Failures after the response has started are re-raised.
    """

    def __init__(self, app) -> None:  # type: ignore[no-untyped-def]
        self.app = app

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message):  # type: ignore[no-untyped-def]
            nonlocal started
            if message.get("type") == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.error("unexpected_error path=%s", scope.get("path"), exc_info=True)
            if started:
                raise
            response = error_response("internal server error", 500)
            await response(scope, receive, send)


__all__ = [
    "UnexpectedErrorMiddleware",
    "error_response",
    "format_validation_errors",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_store_error",
    "handle_survey_error",
]
