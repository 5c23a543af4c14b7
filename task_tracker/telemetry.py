"""OpenTelemetry setup: OTLP/HTTP exporters for traces, metrics and logs.

``OTEL_SDK_DISABLED`` turns all of it off; the API then hands out no-op
tracers and meters, so instrumented code runs unchanged.
"""

import logging
import os

from flask import Flask
from opentelemetry import _logs, metrics, trace
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource, get_aggregated_resources
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


HEALTH_URLS = ("/api/health", "/api/health/db")
METRIC_EXPORT_INTERVAL_MS = 60000

_otel_log_handler: LoggingHandler | None = None
_initialized: bool = False


def telemetry_enabled() -> bool:
    return not os.getenv("OTEL_SDK_DISABLED")


def _build_resource() -> Resource:
    # get_aggregated_resources also merges OTEL_RESOURCE_ATTRIBUTES
    return get_aggregated_resources(
        detectors=[],
        initial_resource=Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "task-tracker"),
                "service.version": os.getenv("OTEL_SERVICE_VERSION", "1.0.0"),
            }
        ),
    )


def _install_tracing(resource: Resource, endpoint: str) -> None:
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")))
    trace.set_tracer_provider(provider)


def _install_metrics(resource: Resource, endpoint: str) -> None:
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))


def _install_logs(resource: Resource, endpoint: str) -> LoggingHandler:
    provider = LoggerProvider(resource=resource)
    provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(endpoint=f"{endpoint}/v1/logs")))
    _logs.set_logger_provider(provider)
    return LoggingHandler(level=logging.DEBUG, logger_provider=provider)


def setup_telemetry() -> None:
    """Install the global providers and library instrumentation.

    Call once per process, before the Flask app is created. Later calls are
    no-ops.
    """
    global _otel_log_handler, _initialized

    if _initialized:
        return

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")
    resource = _build_resource()

    _install_tracing(resource, endpoint)
    _install_metrics(resource, endpoint)
    _otel_log_handler = _install_logs(resource, endpoint)

    SQLAlchemyInstrumentor().instrument()
    # Adds trace_id and span_id to log records
    LoggingInstrumentor().instrument(set_logging_format=True)

    _initialized = True


def attach_log_handler() -> None:
    """Ship records from the root logger through the OTel log pipeline."""
    if _otel_log_handler is None:
        return
    root_logger = logging.getLogger()
    if _otel_log_handler not in root_logger.handlers:
        root_logger.addHandler(_otel_log_handler)


def instrument_flask_app(app: Flask) -> None:
    """Trace requests of ``app``.

    Runs per app rather than globally so Gunicorn workers forked after
    :func:`setup_telemetry` are covered too.
    """
    FlaskInstrumentor().instrument_app(app, excluded_urls=",".join(HEALTH_URLS))


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for creating custom spans.

    Args:
        name: Name of the tracer (typically __name__).

    Returns:
        OpenTelemetry Tracer instance.
    """
    return trace.get_tracer(name)


def get_meter(name: str) -> metrics.Meter:
    return metrics.get_meter(name)
