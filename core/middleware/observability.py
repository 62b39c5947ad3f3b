"""
Observability middleware.

Assigns every request a correlation id (reusing one sent by the client),
logs one structured record when the request finishes and echoes the id
back so clients can quote it when reporting a failed activation.
"""

import logging
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
MAX_CORRELATION_ID_LENGTH = 128


def outcome_for(status_code: int) -> str:
    """Classify a response status for logs and the X-Request-Status header."""
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


def correlation_id_for(request: HttpRequest) -> str:
    """Return the client's correlation id, or a new one if absent or oversized."""
    supplied = request.headers.get(CORRELATION_ID_HEADER, "").strip()
    if supplied and len(supplied) <= MAX_CORRELATION_ID_LENGTH:
        return supplied
    return str(uuid.uuid4())


class ObservabilityMiddleware:
    """Correlation ids and request completion logging."""

    _LOG_LEVELS = {
        "success": logging.INFO,
        "client_error": logging.WARNING,
        "server_error": logging.ERROR,
    }

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Run the request with a correlation id attached.

        Args:
            request: HTTP request

        Returns:
            HTTP response carrying X-Correlation-ID, X-Request-Status and
            X-Request-Duration headers
        """
        request.correlation_id = correlation_id_for(request)  # type: ignore
        started = time.monotonic()

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request raised %s",
                type(e).__name__,
                extra=self._log_extra(request, started, outcome="exception"),
                exc_info=True,
            )
            raise

        outcome = outcome_for(response.status_code)
        extra = self._log_extra(request, started, outcome=outcome)
        extra["status_code"] = response.status_code
        logger.log(
            self._LOG_LEVELS[outcome],
            "%s %s -> %s",
            request.method,
            request.path,
            response.status_code,
            extra=extra,
        )

        response[CORRELATION_ID_HEADER] = request.correlation_id
        response["X-Request-Status"] = outcome
        response["X-Request-Duration"] = f"{extra['duration_ms'] / 1000:.3f}"
        return response

    @staticmethod
    def _log_extra(request: HttpRequest, started: float, outcome: str) -> dict:
        return {
            "correlation_id": request.correlation_id,
            "request_status": outcome,
            "method": request.method,
            "path": request.path,
            "remote_addr": request.META.get("REMOTE_ADDR"),
            "duration_ms": round((time.monotonic() - started) * 1000, 2),
        }
