"""
Per-request correlation IDs.

A caller may send its own ID in ``X-Correlation-ID`` (or ``X-Request-ID``
from proxies); otherwise a short one is minted. The ID ends up in three
places: ``request.state.correlation_id`` for error bodies, a context var
for log records, and the ``X-Correlation-ID`` response header.
"""

import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"
INBOUND_HEADERS = (CORRELATION_HEADER, "X-Request-ID")

_current_id: ContextVar[Optional[str]] = ContextVar("journal_correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """ID of the request being handled, None outside a request."""
    return _current_id.get()


def generate_correlation_id() -> str:
    return uuid.uuid4().hex[:8]


def correlation_id_from_headers(headers: Headers) -> str:
    for name in INBOUND_HEADERS:
        value = headers.get(name, "").strip()
        if value:
            return value
    return generate_correlation_id()


class CorrelationMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = correlation_id_from_headers(request.headers)
        request.state.correlation_id = correlation_id
        token = _current_id.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            _current_id.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
