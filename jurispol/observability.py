from __future__ import annotations

import time
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from prometheus_client import Counter, Histogram


REQUESTS_TOTAL = Counter(
    "jurispol_requests_total",
    "Total requests to the JurisPol relay",
    ["endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "jurispol_request_latency_seconds",
    "Latency (seconds) per endpoint",
    ["endpoint"],
)

GENERATION_LATENCY = Histogram(
    "jurispol_generation_latency_seconds",
    "Latency (seconds) of the upstream generation call",
)

SOURCES_RETURNED = Histogram(
    "jurispol_sources_returned",
    "Number of grounding sources returned per answer",
    buckets=(0, 1, 2, 3, 5, 8, 13),
)

UPSTREAM_ERRORS = Counter(
    "jurispol_upstream_errors_total",
    "Errors raised by the generative-AI provider",
    ["kind"],
)


def setup_tracing(service_name: str, otlp_endpoint: str, instrument_requests: bool = False) -> None:
    """Export spans over OTLP/HTTP.

    The relay only needs its FastAPI spans; the UI and the CLI pass
    `instrument_requests=True` so their calls to /api/chat get a client span
    that links up with the relay's server span.
    """
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces")
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if instrument_requests:
        RequestsInstrumentor().instrument()


def instrument_fastapi(app) -> None:
    FastAPIInstrumentor.instrument_app(app)


class timer:
    """Simple context manager to observe durations."""

    def __init__(self, hist: Histogram):
        self.hist = hist
        self.start: Optional[float] = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.start is None:
            return
        duration = time.perf_counter() - self.start
        self.hist.observe(duration)
