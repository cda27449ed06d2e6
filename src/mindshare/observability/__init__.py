"""Mindshare observability: OpenTelemetry tracing, disabled unless configured."""

from mindshare.observability.tracing import (
    TracingConfigError,
    configure_tracing,
    get_current_trace_id,
    instrument_fastapi,
    set_span_attributes,
    traced_operation,
)

__all__ = [
    "TracingConfigError",
    "configure_tracing",
    "get_current_trace_id",
    "instrument_fastapi",
    "set_span_attributes",
    "traced_operation",
]
