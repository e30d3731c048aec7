from __future__ import annotations

import re

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

rating_cache_hit_total = Counter(
    "rating_cache_hit_total",
    "Secure rating cache hits",
)

rating_cache_miss_total = Counter(
    "rating_cache_miss_total",
    "Secure rating cache misses",
)

rating_masked_total = Counter(
    "rating_masked_total",
    "Total ratings masked for callers without an elevated role",
    ["entity_type"],
)

unauthorized_identity_total = Counter(
    "unauthorized_identity_total",
    "Requests rejected because no user id was found in the security context",
    ["path"],
)


_UUID_RE = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}\b"
)
_INT_RE = re.compile(r"/\d+\b")


def _sanitize_path(path: str) -> str:
    without_uuids = _UUID_RE.sub("{id}", path)
    return _INT_RE.sub("/{id}", without_uuids)


def resolve_http_path_label(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        path_format = getattr(route, "path_format", None)
        if isinstance(path_format, str) and path_format:
            return path_format
        route_path = getattr(route, "path", None)
        if isinstance(route_path, str) and route_path:
            return route_path
    return _sanitize_path(request.url.path)


def observe_http_request(method: str, path: str, status: int, duration: float) -> None:
    status_str = str(status)
    http_requests_total.labels(method=method, path=path, status=status_str).inc()
    http_request_duration_seconds.labels(method=method, path=path).observe(duration)


def observe_rating_cache_hit() -> None:
    rating_cache_hit_total.inc()


def observe_rating_cache_miss() -> None:
    rating_cache_miss_total.inc()


def observe_rating_masked(entity_type: str) -> None:
    rating_masked_total.labels(entity_type=entity_type).inc()


def observe_unauthorized_identity(path: str) -> None:
    unauthorized_identity_total.labels(path=path).inc()


def generate_metrics_payload() -> bytes:
    return generate_latest()


def metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
