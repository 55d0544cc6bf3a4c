"""
Prometheus metrics: request counters and latency, plus the number of
business codes committed per code type. Served at /metrics without
authentication, so keep it on the monitoring network.
"""
import os
import time

from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY

metrics_bp = Blueprint('metrics', __name__)

# Under gunicorn each worker writes to PROMETHEUS_MULTIPROC_DIR and /metrics aggregates them
if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _register_in = None
else:
    registry = REGISTRY
    _register_in = REGISTRY

REQUEST_LABELS = ['method', 'endpoint']

http_requests_total = Counter(
    'http_requests_total', 'HTTP requests served',
    REQUEST_LABELS + ['http_status'], registry=_register_in,
)
http_request_duration_seconds = Histogram(
    'http_request_duration_seconds', 'HTTP request latency in seconds',
    REQUEST_LABELS, registry=_register_in,
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
http_requests_in_flight = Gauge(
    'http_requests_in_flight', 'HTTP requests being handled', registry=_register_in,
)
codes_generated_total = Counter(
    'codes_generated_total', 'Business codes committed, by code type',
    ['code_type'], registry=_register_in,
)


def setup_metrics_instrumentation(app):
    """Time every request and count it by endpoint and status."""

    @app.before_request
    def start_request_timer():
        g.request_started_at = time.perf_counter()
        http_requests_in_flight.inc()

    @app.after_request
    def observe_request(response):
        started = g.pop('request_started_at', None)
        if started is None:
            return response

        http_requests_in_flight.dec()
        endpoint = request.endpoint or 'unknown'
        http_request_duration_seconds.labels(request.method, endpoint).observe(time.perf_counter() - started)
        http_requests_total.labels(request.method, endpoint, response.status_code).inc()
        return response


@metrics_bp.route('/metrics')
def metrics():
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
