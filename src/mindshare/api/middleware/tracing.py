"""OpenTelemetry span enrichment middleware for the Mindshare API.

Adds mindshare.request_id and http.route to the current request span.
Request bodies (brief text, form input) are never recorded.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from mindshare.observability.tracing import set_span_attributes


class TracingEnrichmentMiddleware(BaseHTTPMiddleware):
    """Enrich the active span with Mindshare request context.

    Must run inside RequestIdMiddleware so request.state.request_id is set.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        set_span_attributes(
            {
                "mindshare.request_id": getattr(request.state, "request_id", None),
                "http.route": request.url.path,
            }
        )
        return await call_next(request)
