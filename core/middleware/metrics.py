"""
Prometheus request metrics.

Requests are labelled by the matched URL route rather than the raw path
so label cardinality stays bounded.
"""

import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import http_request_duration_seconds, http_requests_total

_NUMERIC_SEGMENT = re.compile(r"/\d+")
UNMATCHED_ENDPOINT = "unmatched"


def normalize_endpoint(path: str) -> str:
    """Collapse numeric path segments of a raw path."""
    return _NUMERIC_SEGMENT.sub("/{id}", path.split("?")[0])


def endpoint_label(request: HttpRequest) -> str:
    """
    Return the metric label for a request.

    The resolved route is used when URL resolution succeeded; unresolved
    paths share one label apart from the admin, whose ids are collapsed.
    """
    match = getattr(request, "resolver_match", None)
    if match is not None and match.route:
        return "/" + match.route
    if request.path.startswith("/admin/"):
        return normalize_endpoint(request.path)
    return UNMATCHED_ENDPOINT


class MetricsMiddleware:
    """Counts requests and observes their duration."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        started = time.monotonic()
        status_code = 500
        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = endpoint_label(request)
            http_requests_total.labels(
                method=request.method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method, endpoint=endpoint
            ).observe(time.monotonic() - started)
