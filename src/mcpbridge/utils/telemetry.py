"""Tracing for JSON-RPC calls, tool runs, completions and session turns.

Only the OpenTelemetry API is required. Until an SDK provider is installed
every span is a no-op, so instrumented code runs unchanged without it.

Usage::

    from mcpbridge.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("jsonrpc.call") as span:
        span.set_attribute(ATTR_RPC_METHOD, "tools/list")

Spans are printed only after :func:`configure_telemetry` has run, which
the CLI does for ``--telemetry``.
"""

from __future__ import annotations

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "mcpbridge.rpc.method"
ATTR_RPC_ID = "mcpbridge.rpc.id"
ATTR_RPC_ERROR_CODE = "mcpbridge.rpc.error_code"
ATTR_TOOL_NAME = "mcpbridge.tool.name"
ATTR_TOOL_IS_ERROR = "mcpbridge.tool.is_error"
ATTR_MODEL = "mcpbridge.model"
ATTR_MESSAGE_COUNT = "mcpbridge.messages"
ATTR_TOOL_CALL_COUNT = "mcpbridge.tool_calls"
ATTR_TOOL_ROUND = "mcpbridge.tool_round"

_INSTRUMENTATION_NAME = "mcpbridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(service_name: str = "mcp-bridge") -> None:
    """Print every finished span to stdout as JSON.

    Installed by ``mcp-bridge --telemetry``. Needs the ``otel`` extra;
    without it only the no-op tracer of the API package is available.

    Raises:
        ImportError: ``opentelemetry-sdk`` is not installed.
    """
    try:
        from opentelemetry.sdk.resources import SERVICE_NAME, Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = "--telemetry needs opentelemetry-sdk: pip install mcp-bridge[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
