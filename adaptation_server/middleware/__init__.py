"""HTTP middleware and exception handlers."""

from .error_handling_middleware import register_error_handlers
from .request_id import REQUEST_ID_HEADER, RequestIdMiddleware

__all__ = ["REQUEST_ID_HEADER", "RequestIdMiddleware", "register_error_handlers"]
