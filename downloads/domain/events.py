"""
Download token domain events.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class DownloadTokenRotated(DomainEvent):
    """Event raised when a download token is exchanged for a fresh one."""

    def __init__(
        self,
        license_id: int,
        app_binding: str,
        domain: str,
        expiry: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DownloadTokenRotated event.

        Args:
            license_id: License id
            app_binding: ``type/slug`` of the application
            domain: Host that requested the rotation
            expiry: Expiry timestamp of the new token
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.app_binding = app_binding
        self.domain = domain
        self.expiry = expiry
