"""Mindshare FastAPI application factory."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mindshare.api.errors import (
    MindshareHttpError,
    generic_exception_handler,
    http_exception_handler,
    mindshare_error_handler,
    mindshare_http_error_handler,
    request_validation_error_handler,
)
from mindshare.api.middleware.request_id import RequestIdMiddleware
from mindshare.api.middleware.tracing import TracingEnrichmentMiddleware
from mindshare.api.routes.graph import router as graph_router
from mindshare.api.routes.health import MINDSHARE_VERSION
from mindshare.api.routes.health import router as health_router
from mindshare.api.routes.scoring import router as scoring_router
from mindshare.api.routes.universe import router as universe_router
from mindshare.errors import MindshareError
from mindshare.observability.tracing import configure_tracing, instrument_fastapi


def create_app() -> FastAPI:
    """Create and configure the Mindshare FastAPI application.

    Middleware ordering (outermost to innermost):
    1. RequestIdMiddleware - sets request.state.request_id for everything below
    2. TracingEnrichmentMiddleware - copies the request id onto the active span

    Starlette middleware is added in reverse order (last added = outermost).

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Mindshare API",
        description="Synthetic advisor meeting briefs, compliance scoring and similarity graphs",
        version=MINDSHARE_VERSION,
    )

    configure_tracing()

    app.add_middleware(TracingEnrichmentMiddleware)
    app.add_middleware(RequestIdMiddleware)

    instrument_fastapi(app)

    app.add_exception_handler(MindshareHttpError, mindshare_http_error_handler)
    app.add_exception_handler(MindshareError, mindshare_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(health_router)
    app.include_router(universe_router)
    app.include_router(scoring_router)
    app.include_router(graph_router)

    return app
