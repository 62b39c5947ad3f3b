"""
Activation domain events.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseActivated(DomainEvent):
    """Event raised when a license is activated on a site."""

    def __init__(
        self,
        license_id: int,
        domain: str,
        is_new_domain: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            license_id: License id
            domain: Normalized host
            is_new_domain: Whether the site was provisioned by this activation
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.domain = domain
        self.is_new_domain = is_new_domain


class LicenseDeactivated(DomainEvent):
    """Event raised when a license is deactivated from a site."""

    def __init__(
        self,
        license_id: int,
        domain: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseDeactivated event.

        Args:
            license_id: License id
            domain: Normalized host that requested deactivation
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.domain = domain


class LicenseUninstalled(DomainEvent):
    """Event raised when a site is removed from a license."""

    def __init__(
        self,
        license_id: int,
        domain: str,
        remaining_domains: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseUninstalled event.

        Args:
            license_id: License id
            domain: Normalized host that was removed
            remaining_domains: Active domains left on the license
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.domain = domain
        self.remaining_domains = remaining_domains


class LicenseValidityChecked(DomainEvent):
    """Event raised when a site checks its license and download token."""

    def __init__(
        self,
        license_id: int,
        domain: str,
        status: str,
        token_valid: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseValidityChecked event.

        Args:
            license_id: License id
            domain: Normalized host
            status: Effective license status
            token_valid: Whether the presented download token verified
            occurred_at: When the event occurred
        """
        super().__init__(
            occurred_at=occurred_at,
            aggregate_id=str(license_id),
        )
        self.license_id = license_id
        self.domain = domain
        self.status = status
        self.token_valid = token_valid
