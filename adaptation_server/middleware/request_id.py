"""
Request-id middleware for request tracing and logging context.

Pure ASGI middleware: assigns every HTTP request an X-Request-ID (reusing
the client's when supplied), binds it into the structlog context for the
duration of the request and echoes it on the response.
"""

import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..structured_logging.enhanced_logging_config import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:  # pylint: disable=too-few-public-methods  # Reason: ASGI middleware exposes only __call__
    """Adds a request id and request logging context to every HTTP request."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.header_name) or str(uuid.uuid4())
        method = scope.get("method", "")
        path = scope.get("path", "")

        # request.state reads from scope["state"]
        scope.setdefault("state", {})["request_id"] = request_id
        bind_request_context(request_id=request_id, method=method, path=path)

        status_code = 500
        started = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append(self.header_name, request_id)
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
            logger.info(
                "Request completed",
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            clear_request_context()
