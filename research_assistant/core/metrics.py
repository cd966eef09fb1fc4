from __future__ import annotations

import time
from typing import Literal, cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

metrics_router = APIRouter(tags=["monitoring"])

CompletionOutcome = Literal[
    "ok", "upstream_error", "transport_error", "empty_reply", "unparsable_reply"
]

# Label values are route templates or fixed strings only; never user input.

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # Completion calls routinely take seconds, so the upper buckets go further out.
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0),
)

upstream_completions_total = Counter(
    "upstream_completions_total",
    "Completion API calls by API route and outcome",
    labelnames=("route", "outcome"),
)


def route_label(request: Request) -> str:
    """
    Return the matched route template, or "unmatched" when routing failed.

    Raw paths are never used so arbitrary URLs cannot blow up label cardinality.
    """

    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


def record_completion(*, route: str, outcome: CompletionOutcome) -> None:
    upstream_completions_total.labels(route=route, outcome=outcome).inc()


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            labels = {
                "method": request.method,
                "route": route_label(request),
                "status_code": str(int(status_code)),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(
                time.perf_counter() - started
            )


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    payload = generate_latest()
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
