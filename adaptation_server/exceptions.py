"""
Exception hierarchy for the Adaptation Survival server.

Every domain failure is an AdaptationSurvivalError subclass carrying an
ErrorContext, so the API boundary can map it onto a status code and a
JSON {"error": ...} body without inspecting messages.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import HTTPException

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """
    Where an error happened: the request it belongs to and operation metadata
    added by the layer that raised it.
    """

    request_id: str | None = None
    method: str | None = None
    path: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for structured log fields."""
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class AdaptationSurvivalError(Exception):
    """
    Base exception for all Adaptation Survival errors.

    status_code is the HTTP status the error handler responds with;
    user_friendly is the only text that reaches API clients.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: Message safe to return to API clients
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now(UTC)

        self._log_error()

    def _log_error(self) -> None:
        """Warn for client errors, error for server errors."""
        log_method = logger.warning if self.status_code < 500 else logger.error
        log_method(
            "Adaptation survival error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Full error record, including internals; never sent to clients."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class ValidationError(AdaptationSurvivalError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        field: str | None = None,
        value: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.field = field
        self.value = value
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class ResourceNotFoundError(AdaptationSurvivalError):
    """Referenced entity or stored file does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id:
            self.details["resource_id"] = resource_id


class StorageError(AdaptationSurvivalError):
    """Blob store read/write failure."""

    def __init__(self, message: str, context: ErrorContext | None = None, operation: str = "unknown", **kwargs):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.details["operation"] = operation


class StorageTimeoutError(StorageError):
    """Blob store operation exceeded its time budget."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        timeout_seconds: float | None = None,
        **kwargs,
    ):
        super().__init__(message, context, operation=operation, **kwargs)
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None:
            self.details["timeout_seconds"] = timeout_seconds


class DatabaseError(AdaptationSurvivalError):
    """Database operation errors."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table


class ConfigurationError(AdaptationSurvivalError):
    """Configuration and setup errors."""

    def __init__(self, message: str, context: ErrorContext | None = None, config_key: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class LoggedHTTPException(HTTPException):
    """
    HTTPException raised from route handlers that logs itself with request context.

    The detail string is the exact message returned to the client as
    {"error": detail}.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        context: ErrorContext | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.context = context or ErrorContext()
        self.extra = extra or {}

        log_method = logger.warning if status_code < 500 else logger.error
        log_method(
            "HTTP error raised",
            status_code=status_code,
            detail=detail,
            context=self.context.to_dict(),
        )


def create_error_context(**kwargs) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters

    Returns:
        ErrorContext object
    """
    return ErrorContext(**kwargs)

