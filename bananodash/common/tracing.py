"""OpenTelemetry wiring: inbound request spans plus the BananoMiner lookup span."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from bananodash.common.config import settings


def setup_tracing(service_name: str) -> bool:
    """Register an OTLP-exporting tracer provider and trace outbound httpx calls.

    Returns False without touching global state when tracing is switched off.
    """

    if not settings.tracing_enabled:
        return False
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint))
    )
    trace.set_tracer_provider(provider)
    HTTPXClientInstrumentor().instrument()
    return True


def instrument_app(app: FastAPI) -> None:
    """Attach request spans to the catch-all dispatcher."""

    FastAPIInstrumentor.instrument_app(app)
