"""
App configuration for Entitlement Service.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class EntitlementServiceConfig(AppConfig):
    """App configuration for EntitlementService."""

    name = "EntitlementService"
    verbose_name = "Entitlement Service"

    def ready(self):
        """Register event handlers once all apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
