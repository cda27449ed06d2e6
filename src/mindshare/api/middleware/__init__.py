"""Mindshare API middleware package."""

from mindshare.api.middleware.request_id import RequestIdMiddleware
from mindshare.api.middleware.tracing import TracingEnrichmentMiddleware

__all__ = ["RequestIdMiddleware", "TracingEnrichmentMiddleware"]
