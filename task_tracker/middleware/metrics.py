"""Per-request HTTP metrics."""

import time

from flask import Flask, Response, g, request

from task_tracker.telemetry import HEALTH_URLS, get_meter


class RequestMetrics:
    """Counts requests and records their duration, keyed by method, route and status.

    Health probes are not recorded.
    """

    def __init__(self, app: Flask | None = None):
        self.requests_total = None
        self.request_duration = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        meter = get_meter(__name__)
        self.requests_total = meter.create_counter(
            name="http_requests_total",
            description="Total HTTP requests",
            unit="1",
        )
        self.request_duration = meter.create_histogram(
            name="http_request_duration_ms",
            description="HTTP request duration in milliseconds",
            unit="ms",
        )
        app.before_request(self._start_timer)
        app.after_request(self._record)

    @staticmethod
    def _start_timer() -> None:
        g.request_start_time = time.perf_counter()

    def _record(self, response: Response) -> Response:
        if request.path in HEALTH_URLS:
            return response

        started = g.get("request_start_time")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        attributes = {
            "method": request.method,
            # unmatched requests have no rule
            "route": request.url_rule.rule if request.url_rule else request.path,
            "status": str(response.status_code),
        }
        self.requests_total.add(1, attributes)
        self.request_duration.record(elapsed_ms, attributes)
        return response


def register_metrics_middleware(app: Flask) -> RequestMetrics:
    """Attach :class:`RequestMetrics` to ``app``."""
    return RequestMetrics(app)
