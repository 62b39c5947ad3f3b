"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when a license is issued to a hosted application."""

    def __init__(
        self,
        license_id: int,
        service_id: str,
        app_binding: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: License id
            service_id: Service the license belongs to
            app_binding: ``type/slug`` of the application
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.service_id = service_id
        self.app_binding = app_binding


class LicenseStatusChanged(DomainEvent):
    """Event raised when a license's explicit status is changed."""

    def __init__(
        self,
        license_id: int,
        old_status: str,
        new_status: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseStatusChanged event.

        Args:
            license_id: License id
            old_status: Effective status before the change
            new_status: Effective status after the change
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.old_status = old_status
        self.new_status = new_status


class LicenseKeyRegenerated(DomainEvent):
    """Event raised when a license receives a new key."""

    def __init__(
        self,
        license_id: int,
        partial_key: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeyRegenerated event.

        Args:
            license_id: License id
            partial_key: Masked new key
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.partial_key = partial_key


class LicenseDeleted(DomainEvent):
    """Event raised when a license is deleted."""

    def __init__(
        self,
        license_id: int,
        tokens_deleted: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseDeleted event.

        Args:
            license_id: License id
            tokens_deleted: Number of download tokens removed with it
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.tokens_deleted = tokens_deleted
