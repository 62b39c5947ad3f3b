"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.

A license's effective status is either the explicit status stored on it
or, when none is stored, a status derived from its start and end dates.
Domain activations are kept in a map keyed by normalized host.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Mapping, Optional

from django.utils import timezone

from core.domain.exceptions import (
    AppMismatchError,
    LicenseAlreadyDeactivatedError,
    LicenseDeactivatedError,
    LicenseExpiredError,
    LicenseNotIssuedError,
    LicenseRevokedError,
    LicenseSuspendedError,
)
from core.domain.value_objects import AppBinding, AppType, LicenseStatus, SiteURL

UNLIMITED_DOMAINS = -1

_BLOCKING_STATUSES = {
    LicenseStatus.EXPIRED.value: LicenseExpiredError,
    LicenseStatus.SUSPENDED.value: LicenseSuspendedError,
    LicenseStatus.REVOKED.value: LicenseRevokedError,
    LicenseStatus.DEACTIVATED.value: LicenseDeactivatedError,
}


@dataclass(frozen=True)
class ActivatedDomain:
    """A host a license is activated on, with the keyed hash of its site secret."""

    origin: str
    secret_hash: str

    def __post_init__(self):
        """Validate activation record."""
        if not self.origin:
            raise ValueError("Activated domain origin is required")
        if not self.secret_hash:
            raise ValueError("Activated domain secret hash is required")


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents an entitlement to one hosted application, usable on a bounded
    number of domains. This is an immutable value object with business logic;
    every transition returns a new instance that the caller must persist.
    """

    id: Optional[int]
    license_key: str
    service_id: str
    owner_id: int = 0
    licensee_fullname: str = ""
    app_binding: Optional[AppBinding] = None
    app_id: Optional[int] = None
    status: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    max_allowed_domains: int = UNLIMITED_DOMAINS
    activated_domains: Mapping[str, ActivatedDomain] = field(default_factory=dict)
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.service_id:
            raise ValueError("Service ID is required")
        if self.max_allowed_domains < UNLIMITED_DOMAINS:
            raise ValueError("Max allowed domains must be -1 (unlimited) or greater")
        if self.status and self.status.strip().lower() not in LicenseStatus.values():
            raise ValueError(f"Invalid license status: {self.status}")
        if (self.app_binding is None) != (self.app_id is None):
            raise ValueError("App binding and app ID must be set together")
        object.__setattr__(self, "activated_domains", dict(self.activated_domains))

    @classmethod
    def create(
        cls,
        service_id: str,
        license_key: str = "",
        owner_id: int = 0,
        licensee_fullname: str = "",
        max_allowed_domains: int = UNLIMITED_DOMAINS,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        status: str = "",
    ) -> "License":
        """
        Create a new, not yet issued, License entity.

        Args:
            service_id: Service the license belongs to
            license_key: License key (may be assigned later)
            owner_id: Owning principal id (0 for guests)
            licensee_fullname: Display name of the licensee
            max_allowed_domains: Domain cap (-1 unlimited, 0 none)
            start_date: Optional start of validity
            end_date: Optional end of validity (None means lifetime)
            status: Optional explicit status

        Returns:
            License entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            license_key=license_key,
            service_id=service_id,
            owner_id=owner_id,
            licensee_fullname=licensee_fullname,
            status=status,
            start_date=start_date,
            end_date=end_date,
            max_allowed_domains=max_allowed_domains,
            created_at=now,
            updated_at=now,
        )

    # Status

    def get_status(self, now: Optional[datetime] = None) -> str:
        """
        Return the effective status.

        An explicit stored status always wins. Otherwise: no end date is
        ``lifetime``; before the start date is ``pending``; after the end date
        is ``expired``; anything else is ``active``.

        Args:
            now: Reference time (defaults to now)

        Returns:
            Status string
        """
        if self.status and self.status.strip():
            return self.status.strip().lower()

        if self.end_date is None:
            return LicenseStatus.LIFETIME.value

        now = now or timezone.now()
        if self.start_date is not None and now < self.start_date:
            return LicenseStatus.PENDING.value
        if now > self.end_date:
            return LicenseStatus.EXPIRED.value
        return LicenseStatus.ACTIVE.value

    def is_issued(self) -> bool:
        """Whether the license is bound to a hosted application."""
        return self.app_binding is not None and self.app_id is not None

    def get_app_id(self) -> Optional[int]:
        """Return the id of the bound application."""
        return self.app_id

    def is_deactivated(self, now: Optional[datetime] = None) -> bool:
        """Whether the effective status is ``deactivated``."""
        return self.get_status(now) == LicenseStatus.DEACTIVATED.value

    def can_serve_license(
        self, app_type: AppType, app_id: int, now: Optional[datetime] = None
    ) -> None:
        """
        Authorize serving this license to the given application.

        Plugin, Theme and Software ids come from separate tables, so an
        application is identified by its type and id together.

        Args:
            app_type: Type of the application making the request
            app_id: Id of the application making the request
            now: Reference time (defaults to now)

        Raises:
            LicenseNotIssuedError: License is not bound to an application
            AppMismatchError: License is bound to a different application
            ForbiddenError: Status is expired, suspended, revoked or deactivated
        """
        if not self.is_issued():
            raise LicenseNotIssuedError()

        if self.app_binding.app_type != app_type or self.get_app_id() != app_id:
            raise AppMismatchError()

        error_class = _BLOCKING_STATUSES.get(self.get_status(now))
        if error_class is not None:
            raise error_class()

    # Domains

    def is_new_domain(self, url: str) -> bool:
        """
        Whether the given site has no activation on this license.

        Args:
            url: URL or bare host name

        Returns:
            True if the normalized host is not in the activation map
        """
        return SiteURL.parse(url).host not in self.activated_domains

    def get_active_domain(self, url: str) -> Optional[ActivatedDomain]:
        """Return the activation record for a site, if any."""
        return self.activated_domains.get(SiteURL.parse(url).host)

    def get_total_active_domains(self) -> int:
        """Return the number of activated domains."""
        return len(self.activated_domains)

    def has_reached_max_allowed_domains(self) -> bool:
        """Whether no further domain can be activated."""
        if self.max_allowed_domains == UNLIMITED_DOMAINS:
            return False
        return self.get_total_active_domains() >= self.max_allowed_domains

    def with_active_domain(self, url: str, secret_hash: str) -> "License":
        """
        Return a new License with the site recorded in the activation map.

        An existing record for the same host is replaced.
        """
        site = SiteURL.parse(url)
        domains = dict(self.activated_domains)
        domains[site.host] = ActivatedDomain(origin=site.origin, secret_hash=secret_hash)
        return self._evolve(activated_domains=domains)

    def without_active_domain(self, url: str) -> "License":
        """Return a new License with the site removed from the activation map."""
        host = SiteURL.parse(url).host
        domains = {k: v for k, v in self.activated_domains.items() if k != host}
        return self._evolve(activated_domains=domains)

    # Transitions

    def deactivate(self) -> "License":
        """
        Return a new License with the explicit ``deactivated`` status.

        Activated domains are kept.

        Raises:
            LicenseAlreadyDeactivatedError: If already deactivated
        """
        if self.is_deactivated():
            raise LicenseAlreadyDeactivatedError()
        return self._evolve(status=LicenseStatus.DEACTIVATED.value)

    def with_status(self, status: str) -> "License":
        """
        Return a new License with an explicit status.

        An empty string clears the stored status so it is derived from dates.

        Raises:
            ValueError: If the status is not an allowed value
        """
        status = (status or "").strip().lower()
        if status and status not in LicenseStatus.values():
            raise ValueError(f"Invalid license status: {status}")
        return self._evolve(status=status)

    def with_license_key(self, license_key: str) -> "License":
        """Return a new License carrying a different key."""
        return self._evolve(license_key=license_key)

    def issue_to(self, app_binding: AppBinding, app_id: int) -> "License":
        """Return a new License bound to a hosted application."""
        return self._evolve(app_binding=app_binding, app_id=app_id)

    def partial_key(self) -> str:
        """Return the masked form of the license key for display and logs."""
        return partial_key(self.license_key)

    def _evolve(self, **changes) -> "License":
        changes.setdefault("updated_at", timezone.now())
        return replace(self, **changes)


def partial_key(license_key: str) -> str:
    """
    Mask a license key, keeping only its last 12 characters.

    Args:
        license_key: Full license key

    Returns:
        ``****-****-****-****-`` followed by the key's last 12 characters
    """
    return "****-****-****-****-" + (license_key or "")[-12:]
