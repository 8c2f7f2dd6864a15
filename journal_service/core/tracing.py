"""
Optional OpenTelemetry tracing.

Off by default. With OTEL_ENABLED=true the service exports spans for
incoming requests, outbound inference calls and the ``analyze_content``
span opened by the inference client. Spans go to OTEL_EXPORTER_OTLP_ENDPOINT
when set (needs the ``otlp`` extra), to stdout otherwise.
"""

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

logger = logging.getLogger("Journal.Tracing")

_provider: Optional[TracerProvider] = None


def is_tracing_enabled() -> bool:
    return os.getenv("OTEL_ENABLED", "false").strip().lower() in ("1", "true", "yes")


def _build_exporter() -> SpanExporter:
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return ConsoleSpanExporter()
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    logger.info(f"Exporting spans to {endpoint}")
    return OTLPSpanExporter(endpoint=endpoint)


def setup_tracing(service_name: str) -> Optional[TracerProvider]:
    """Install the global tracer provider once; returns None when disabled."""
    global _provider

    if _provider is not None or not is_tracing_enabled():
        return _provider

    _provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", service_name)})
    )
    _provider.add_span_processor(BatchSpanProcessor(_build_exporter()))
    trace.set_tracer_provider(_provider)
    logger.info("Tracing enabled")
    return _provider


def get_tracer(name: str) -> trace.Tracer:
    """Tracer from the global provider; spans are no-ops until one is installed."""
    return trace.get_tracer(name)


def instrument_app(app) -> None:
    if is_tracing_enabled():
        FastAPIInstrumentor.instrument_app(app)
        HTTPXClientInstrumentor().instrument()


def shutdown_tracing() -> None:
    global _provider
    if _provider is not None:
        _provider.shutdown()
        _provider = None
