"""
Exception handlers for FastAPI integration.

Every failure leaving a route is rendered as JSON {"error": "<message>"}:
domain errors use their user-friendly message and status code, request
body validation failures become 400, and anything unexpected becomes a
generic 500. No exception escapes to the ASGI server.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..error_types import ErrorMessages
from ..exceptions import AdaptationSurvivalError, LoggedHTTPException
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

_MISSING_ERROR_TYPES = frozenset({"missing", "string_too_short"})


def _error_body(message: str, details: dict[str, Any] | None = None, include_details: bool = False) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if include_details and details:
        body["details"] = details
    return body


def classify_validation_errors(errors: list[dict[str, Any]]) -> str:
    """
    Pick the client message for request body validation failures.

    An absent (or empty) required field reports "Missing required fields";
    every other failure, including an unparseable body, reports
    "Invalid request data".
    """
    for error in errors:
        location = error.get("loc", ())
        if len(location) < 2 or location[0] != "body":
            continue
        if error.get("type") in _MISSING_ERROR_TYPES or error.get("input") in (None, ""):
            return ErrorMessages.MISSING_REQUIRED_FIELDS
    return ErrorMessages.INVALID_REQUEST_DATA


def register_error_handlers(app: FastAPI, include_details: bool = False) -> None:
    """
    Register exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
        include_details: Whether to include error details in responses
                        (False in production)
    """

    @app.exception_handler(AdaptationSurvivalError)
    async def adaptation_error_handler(request: Request, exc: AdaptationSurvivalError):
        """Handle domain exceptions; they were logged when raised."""
        logger.info(
            "Domain error handled",
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.user_friendly, exc.details, include_details),
        )

    @app.exception_handler(LoggedHTTPException)
    async def logged_http_exception_handler(request: Request, exc: LoggedHTTPException):
        """Handle route-level HTTP errors; extra fields are merged into the body."""
        content = _error_body(str(exc.detail))
        content.update(exc.extra)
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP errors such as unknown routes."""
        logger.info("HTTP exception handled", status_code=exc.status_code, path=request.url.path, detail=exc.detail)
        return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        """Map request body validation failures onto 400."""
        errors = list(exc.errors())
        message = classify_validation_errors(errors)
        logger.warning("Request validation failed", path=request.url.path, message=message, errors=str(errors))
        details = {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]}
        return JSONResponse(status_code=400, content=_error_body(message, details, include_details))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        logger.error(
            "Unhandled exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )
        details = {"error_type": type(exc).__name__, "message": str(exc)}
        return JSONResponse(status_code=500, content=_error_body(ErrorMessages.INTERNAL_ERROR, details, include_details))

    logger.info("Error handlers registered for FastAPI application", include_details=include_details)
