"""
Liveness, readiness and Prometheus scrape endpoints.
"""

import logging

from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from core.infrastructure.crypto import derive_key_from_settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "entitlement-service"


def check_database() -> bool:
    """Run a trivial query on the default connection."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.warning("Readiness: database unavailable", exc_info=True)
        return False
    return True


def check_cache() -> bool:
    """Write and read back a probe key."""
    try:
        cache.set("readiness-probe", SERVICE_NAME, 10)
        return cache.get("readiness-probe") == SERVICE_NAME
    except Exception:  # pylint: disable=broad-exception-caught
        logger.warning("Readiness: cache unavailable", exc_info=True)
        return False


def check_signing_key() -> bool:
    """Tokens and site secrets cannot be issued without a master secret."""
    try:
        derive_key_from_settings()
    except ImproperlyConfigured:
        logger.error("Readiness: LICENSE_MASTER_SECRET is not configured")
        return False
    return True


READINESS_CHECKS = {
    "database": check_database,
    "cache": check_cache,
    "signing_key": check_signing_key,
}


class HealthView(View):
    """Liveness probe; answers as long as the process serves requests."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": SERVICE_NAME})


class ReadyView(View):
    """Readiness probe; 503 until every dependency check passes."""

    def get(self, _request):
        checks = {name: check() for name, check in READINESS_CHECKS.items()}
        ready = all(checks.values())
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "checks": checks},
            status=200 if ready else 503,
        )


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
