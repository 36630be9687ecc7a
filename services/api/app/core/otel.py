from __future__ import annotations

import logging

from app.core.config import settings
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

HONEYCOMB_TRACES_ENDPOINT = "https://api.honeycomb.io/v1/traces"


def _exporter() -> OTLPSpanExporter:
    # Prefer env vars (OTEL_EXPORTER_OTLP_ENDPOINT, etc.); allow settings overrides.
    endpoint = settings.otel_otlp_endpoint
    if settings.honeycomb_api_key:
        return OTLPSpanExporter(
            endpoint=endpoint or HONEYCOMB_TRACES_ENDPOINT,
            headers={
                "x-honeycomb-team": settings.honeycomb_api_key,
                "x-honeycomb-dataset": settings.honeycomb_dataset,
            },
        )
    return OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()


def init_otel(app) -> None:
    if not settings.telemetry_enabled:
        logger.info("Telemetry export disabled")
        return

    resource = Resource.create({"service.name": settings.api_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(_exporter()))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()
    logger.info("Telemetry export enabled", extra={"service": settings.api_name})
