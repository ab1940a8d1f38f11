import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.metrics import Metrics, metrics as default_metrics


def route_label(request: Request) -> str:
    """Route template for the request (/api/v1/teachers/{teacher_id}), or the raw path when nothing matched."""
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    regex = getattr(route, "path_regex", None)
    if not template or regex is None:
        return request.url.path

    path = request.url.path
    if regex.match(path):
        return template

    # the route only knows its own template; put back the prefix it was included under
    for index, char in enumerate(path):
        if char == "/" and index and regex.match(path[index:]):
            return path[:index] + template
    return template


class MetricsMiddleware(BaseHTTPMiddleware):
    """Times every request, adds X-Latency-Ms and records the HTTP metrics."""

    def __init__(self, app, metrics: Metrics = default_metrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # unhandled errors become a 500 further out; count them here
            self.metrics.observe_request(request.method, route_label(request), 500, time.perf_counter() - start)
            raise
        elapsed = time.perf_counter() - start

        self.metrics.observe_request(request.method, route_label(request), response.status_code, elapsed)

        response.headers["X-Latency-Ms"] = str(int(elapsed * 1000))
        return response
