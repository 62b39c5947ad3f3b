"""
Event handlers for domain events.

These handlers process domain events for side effects like audit
logging. Cache invalidation is done by the cached license repository
and needs no handler.
"""

import logging

from core.domain.events import DomainEvent, EventHandler

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event to the ``audit`` log as a structured record.
    """

    audit_logger = logging.getLogger("audit")

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        self.audit_logger.info(
            "%s license=%s", event.event_type, event.aggregate_id, extra=event.to_dict()
        )


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from activations.domain.events import (
        LicenseActivated,
        LicenseDeactivated,
        LicenseUninstalled,
        LicenseValidityChecked,
    )
    from core.infrastructure.events import event_bus
    from downloads.domain.events import DownloadTokenRotated
    from licenses.domain.events import (
        LicenseDeleted,
        LicenseIssued,
        LicenseKeyRegenerated,
        LicenseStatusChanged,
    )

    audit_handler = AuditLogEventHandler()

    for event_type in (
        LicenseIssued,
        LicenseStatusChanged,
        LicenseKeyRegenerated,
        LicenseDeleted,
        LicenseActivated,
        LicenseDeactivated,
        LicenseUninstalled,
        LicenseValidityChecked,
        DownloadTokenRotated,
    ):
        event_bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
