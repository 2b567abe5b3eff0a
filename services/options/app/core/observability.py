from typing import Optional

from prometheus_client import Counter
from starlette_exporter import PrometheusMiddleware, handle_metrics

try:
    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import (
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    _HAS_OTEL = True
except ImportError:  # pragma: no cover - tracing extra not installed
    _HAS_OTEL = False


OPTION_MUTATIONS = Counter(
    "option_mutations_total",
    "Count of option writes by kind and operation",
    ["kind", "operation"],
)


def record_option_mutation(kind: str, operation: str, count: int = 1) -> None:
    OPTION_MUTATIONS.labels(kind=kind, operation=operation).inc(count)


def add_prometheus(app, app_name: str = "options") -> None:
    app.add_middleware(
        PrometheusMiddleware,
        app_name=app_name,
        prefix=app_name,
        group_paths=True,
    )
    app.add_route("/metrics", handle_metrics)


def add_tracing(app, app_name: str, endpoint: Optional[str]) -> bool:
    """Instrument the app with OpenTelemetry; False when the extra is missing."""
    if not _HAS_OTEL:
        return False
    resource = Resource.create({"service.name": app_name})
    provider = TracerProvider(resource=resource)
    if endpoint:
        processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
        provider.add_span_processor(processor)
    else:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    return True
