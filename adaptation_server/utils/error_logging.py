"""
Helpers that pair error logging with raising.

Repositories and the blob store call log_and_raise() instead of raising
directly, so every storage failure leaves one structured log line with the
operation context before it reaches a route handler.
"""

from typing import Any, NoReturn

from fastapi import Request

from ..exceptions import AdaptationSurvivalError, ErrorContext, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def log_and_raise(
    exception_class: type[AdaptationSurvivalError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    logger_name: str | None = None,
    **exception_kwargs: Any,
) -> NoReturn:
    """
    Log message with its context, then raise exception_class.

    Args:
        exception_class: Domain exception to raise
        message: Technical message for logs
        context: Operation context; an empty one is created when omitted
        details: Extra structured fields for the log line and the exception
        user_friendly: Message that may be shown to API clients
        logger_name: Log under this name instead of this module's
        **exception_kwargs: Passed through to the exception (operation, table, field, ...)
    """
    context = context or create_error_context()
    (get_logger(logger_name) if logger_name else logger).error(
        message,
        error_type=exception_class.__name__,
        context=context.to_dict(),
        details=details or {},
    )
    raise exception_class(message, context=context, details=details, user_friendly=user_friendly, **exception_kwargs)


def create_context_from_request(request: Request | None) -> ErrorContext:
    """Build an ErrorContext from the request id, method, path and client of a request."""
    if request is None:
        return create_error_context(method="unknown", path="unknown")

    return create_error_context(
        request_id=getattr(request.state, "request_id", None),
        method=request.method,
        path=request.url.path,
        metadata={
            "user_agent": request.headers.get("user-agent", ""),
            "content_type": request.headers.get("content-type", ""),
            "remote_addr": request.client.host if request.client else "",
        },
    )
