# btrfs_exporter/utils/tracing.py - Distributed tracing setup
"""
OpenTelemetry setup for the collection path.

Spans are only exported when an OTLP collector endpoint is configured.
Without one the OpenTelemetry API stays a no-op and the instrumented code
runs unchanged.
"""

import logging
from typing import Optional

from opentelemetry import propagate, trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator


logger = logging.getLogger(__name__)

_provider: Optional[TracerProvider] = None


def setup_tracing(endpoint: Optional[str], service_name: str = 'btrfs-exporter') -> Optional[TracerProvider]:
    """
    Install a global tracer provider exporting to ``endpoint`` over OTLP/gRPC.

    Args:
        endpoint: Collector address, e.g. ``http://localhost:4317``. ``None``
            leaves tracing disabled.
        service_name: Value of the ``service.name`` resource attribute

    Returns:
        The installed provider, or None when tracing is disabled
    """
    global _provider

    # W3C traceparent/tracestate on incoming scrapes
    propagate.set_global_textmap(TraceContextTextMapPropagator())

    if not endpoint:
        logger.debug("No tracing endpoint configured, tracing disabled")
        return None

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(f"Exporting traces to {endpoint}")
    return provider


def shutdown_tracing():
    """Flush pending spans and stop the exporter, if one was started."""
    global _provider

    if _provider is None:
        return

    logger.debug("Flushing pending spans")
    _provider.shutdown()
    _provider = None


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)
