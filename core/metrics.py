"""
core/metrics.py

Prometheus collectors for the HTTP layer, teachers and attendance.
A single ``Metrics`` object is built at import time and lives for the whole
process; it owns its own CollectorRegistry so the collectors can be exposed on
/metrics without touching prometheus_client's global registry.
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest
from prometheus_client import CONTENT_TYPE_LATEST


class Metrics:
    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        # =========================
        # HTTP
        # =========================
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "path", "status"],
            registry=self.registry,
        )
        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency",
            ["method", "path"],
            registry=self.registry,
        )

        # =========================
        # Teachers
        # =========================
        self.teachers_created_total = Counter(
            "teachers_created_total",
            "Total number of teachers created",
            registry=self.registry,
        )
        self.teachers_total = Gauge(
            "teachers_total",
            "Current total number of teachers",
            registry=self.registry,
        )

        # =========================
        # Attendance
        # =========================
        self.attendance_created_total = Counter(
            "attendance_created_total",
            "Total number of attendance records created",
            registry=self.registry,
        )
        self.attendance_checkin_total = Counter(
            "attendance_checkin_total",
            "Total number of check-ins",
            registry=self.registry,
        )
        self.attendance_checkout_total = Counter(
            "attendance_checkout_total",
            "Total number of check-outs",
            registry=self.registry,
        )
        self.attendance_today_checked_in = Gauge(
            "attendance_today_checked_in",
            "Number of teachers checked in today",
            registry=self.registry,
        )

    def observe_request(self, method: str, path: str, status: int, seconds: float) -> None:
        self.http_requests_total.labels(method, path, str(status)).inc()
        self.http_request_duration.labels(method, path).observe(seconds)

    def render(self) -> bytes:
        return generate_latest(self.registry)


# process-wide collectors
metrics = Metrics()
