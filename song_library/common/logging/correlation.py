"""Correlation ID middleware for request tracing."""

import uuid
import logging
import contextvars

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-ID"

# Context variable for correlation ID (thread-safe, async-safe)
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def generate_correlation_id() -> str:
    """Generate unique correlation ID."""
    return str(uuid.uuid4())[:8]


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(cid: str | None):
    """Set correlation ID in context."""
    correlation_id_var.set(cid)


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware that sets correlation ID for each HTTP request.

    Reuses an incoming X-Request-ID header when present, otherwise generates
    one, and echoes it back on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        cid = request.headers.get(REQUEST_ID_HEADER) or generate_correlation_id()
        token = correlation_id_var.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = cid
        return response


class CorrelationLogFilter(logging.Filter):
    """
    Logging filter that adds correlation_id to log records.

    Use with standard logging to auto-inject context vars.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True
