"""OpenTelemetry tracing configuration for Mindshare.

Tracing is off by default. When enabled, the HTTP app is instrumented and the
pipeline entry points open spans carrying mindshare.* attributes (seed, count,
rule set, request id). Brief text is never recorded on spans.

Environment Variables:
    MINDSHARE_OTEL_ENABLED: Set to "1" to enable tracing (default: disabled)
    MINDSHARE_REQUIRE_OTEL: Set to "1" to fail startup if tracing cannot initialize
    MINDSHARE_OTEL_SERVICE_NAME: Service name for spans (default: "mindshare")
    MINDSHARE_OTEL_EXPORTER: Exporter type - "otlp" or "console" (default: "otlp")
    MINDSHARE_OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint URL (optional)
    MINDSHARE_OTEL_EXPORTER_OTLP_PROTOCOL: "grpc" or "http" (default: "grpc")
    MINDSHARE_OTEL_RESOURCE_ATTRS: Comma-separated k=v pairs for resource attributes
    MINDSHARE_OTEL_TEST_CAPTURE: Set to "1" to use in-memory exporter for tests
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
    from opentelemetry.sdk.trace.export import SpanExporter

logger = logging.getLogger(__name__)

MINDSHARE_OTEL_ENABLED_ENV = "MINDSHARE_OTEL_ENABLED"
MINDSHARE_REQUIRE_OTEL_ENV = "MINDSHARE_REQUIRE_OTEL"
MINDSHARE_OTEL_SERVICE_NAME_ENV = "MINDSHARE_OTEL_SERVICE_NAME"
MINDSHARE_OTEL_EXPORTER_ENV = "MINDSHARE_OTEL_EXPORTER"
MINDSHARE_OTEL_ENDPOINT_ENV = "MINDSHARE_OTEL_EXPORTER_OTLP_ENDPOINT"
MINDSHARE_OTEL_PROTOCOL_ENV = "MINDSHARE_OTEL_EXPORTER_OTLP_PROTOCOL"
MINDSHARE_OTEL_RESOURCE_ATTRS_ENV = "MINDSHARE_OTEL_RESOURCE_ATTRS"
MINDSHARE_OTEL_TEST_CAPTURE_ENV = "MINDSHARE_OTEL_TEST_CAPTURE"

TRACER_NAME = "mindshare"

_tracer_provider: TracerProvider | None = None
_is_configured: bool = False
_test_exporter: Any = None  # InMemorySpanExporter when test capture is on


class TracingConfigError(Exception):
    """Raised when tracing configuration fails and MINDSHARE_REQUIRE_OTEL=1."""


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").strip().lower()
    if val in ("1", "true", "yes"):
        return True
    return default


def _get_env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default).strip()


def _parse_resource_attrs(attrs_str: str) -> dict[str, str]:
    """Parse comma-separated k=v resource attributes."""
    result: dict[str, str] = {}
    for pair in attrs_str.split(","):
        pair = pair.strip()
        if "=" in pair:
            k, v = pair.split("=", 1)
            result[k.strip()] = v.strip()
    return result


def _create_otlp_exporter(protocol: str, endpoint: str | None) -> SpanExporter:
    """Create OTLP exporter based on protocol (requires the otlp extra)."""
    kwargs: dict[str, Any] = {}
    if endpoint:
        kwargs["endpoint"] = endpoint

    if protocol == "http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPExporter,
        )

        return HTTPExporter(**kwargs)

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter as GRPCExporter,
    )

    return GRPCExporter(**kwargs)


def tracing_enabled() -> bool:
    return _get_env_bool(MINDSHARE_OTEL_ENABLED_ENV, False)


def configure_tracing() -> bool:
    """Configure OpenTelemetry tracing for Mindshare.

    Idempotent - safe to call multiple times.

    Returns:
        True if tracing is enabled and configured, False otherwise.

    Raises:
        TracingConfigError: If MINDSHARE_REQUIRE_OTEL=1 and configuration fails.
    """
    global _tracer_provider, _is_configured, _test_exporter

    require_otel = _get_env_bool(MINDSHARE_REQUIRE_OTEL_ENV, False)
    test_capture = _get_env_bool(MINDSHARE_OTEL_TEST_CAPTURE_ENV, False)

    if not tracing_enabled():
        _is_configured = True
        logger.debug("OpenTelemetry tracing disabled (%s not set)", MINDSHARE_OTEL_ENABLED_ENV)
        return False

    # The global provider can only be set once per process; reuse the capture exporter.
    if _test_exporter is not None and test_capture:
        return True

    if _is_configured and _tracer_provider is not None:
        return True

    _is_configured = True

    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )

        service_name = _get_env_str(MINDSHARE_OTEL_SERVICE_NAME_ENV, "mindshare")
        exporter_type = _get_env_str(MINDSHARE_OTEL_EXPORTER_ENV, "otlp")
        endpoint = _get_env_str(MINDSHARE_OTEL_ENDPOINT_ENV, "")
        protocol = _get_env_str(MINDSHARE_OTEL_PROTOCOL_ENV, "grpc")

        resource_attrs = {"service.name": service_name}
        resource_attrs.update(
            _parse_resource_attrs(_get_env_str(MINDSHARE_OTEL_RESOURCE_ATTRS_ENV, ""))
        )
        provider = TracerProvider(resource=Resource.create(resource_attrs))

        if test_capture:
            from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
                InMemorySpanExporter,
            )

            _test_exporter = InMemorySpanExporter()
            provider.add_span_processor(SimpleSpanProcessor(_test_exporter))
        elif exporter_type == "console":
            provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        else:
            otlp_exporter = _create_otlp_exporter(protocol, endpoint or None)
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        trace.set_tracer_provider(provider)
        _tracer_provider = provider

        logger.info(
            "OpenTelemetry tracing configured: service=%s, exporter=%s",
            service_name,
            exporter_type if not test_capture else "in-memory",
        )
        return True

    except Exception as e:
        logger.error("Failed to configure OpenTelemetry tracing: %s", e)
        if require_otel:
            raise TracingConfigError(
                f"OpenTelemetry tracing required but configuration failed: {e}"
            ) from e
        return False


def instrument_fastapi(app: Any) -> None:
    """Instrument FastAPI application with OpenTelemetry.

    Args:
        app: FastAPI application instance.
    """
    if not tracing_enabled():
        return

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app, excluded_urls="health")
        logger.debug("FastAPI instrumented with OpenTelemetry")
    except Exception as e:
        logger.warning("Failed to instrument FastAPI: %s", e)


def get_current_trace_id() -> str | None:
    """Hex trace id of the active span, or None if no span is recording."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x")


def _attribute_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def set_span_attributes(attributes: dict[str, Any]) -> None:
    """Set attributes on the current span; None values are skipped.

    Args:
        attributes: Dictionary of attribute key-value pairs.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(key, _attribute_value(value))


@contextmanager
def traced_operation(name: str, attributes: dict[str, Any] | None = None) -> Iterator[None]:
    """Run a block inside a span named ``name``.

    A no-op tracer is used when tracing is not configured, so callers need not
    check whether tracing is on.
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name):
        if attributes:
            set_span_attributes(attributes)
        yield


def get_test_spans() -> list[ReadableSpan]:
    """Get captured spans from the in-memory exporter (for testing).

    Returns:
        List of captured spans if MINDSHARE_OTEL_TEST_CAPTURE=1, else empty list.
    """
    if _test_exporter is not None:
        return list(_test_exporter.get_finished_spans())
    return []


def reset_tracing() -> None:
    """Reset tracing configuration (for testing).

    The global TracerProvider cannot be replaced once set, so the capture
    exporter is kept and only its spans are cleared.
    """
    global _is_configured

    if _test_exporter is not None:
        _test_exporter.clear()
    _is_configured = False
