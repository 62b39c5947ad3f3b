"""
ActivateLicenseHandler.

Handler for activating a license on a site.
"""

import logging
from typing import Optional

from django.conf import settings

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.activation_dto import ActivateLicenseResponseDTO
from activations.application.services.license_write_retry import run_with_conflict_retry
from activations.domain.domain_secret import DomainSecretService
from activations.domain.events import LicenseActivated
from core.domain.exceptions import (
    DomainException,
    LicenseNotFoundError,
    LicenseNotIssuedError,
)
from core.domain.value_objects import SiteURL
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import license_activations_total
from downloads.domain.services import DEFAULT_TTL_SECONDS, DownloadTokenService
from hosted_apps.domain.services import HostedAppResolver
from hosted_apps.ports.hosted_app_repository import HostedAppRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(
        self,
        hosted_app_repository: HostedAppRepository,
        license_repository: LicenseRepository,
        domain_secret_service: DomainSecretService,
        download_token_service: DownloadTokenService,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repositories and services."""
        self.hosted_app_repository = hosted_app_repository
        self.license_repository = license_repository
        self.domain_secret_service = domain_secret_service
        self.download_token_service = download_token_service
        self.clock = clock

    def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        A site seen for the first time is provisioned (quota permitting) and
        receives its one-time secret. A known site must authenticate with
        that secret. Either way a fresh download token is issued in the same
        transaction as the activation write.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with token, expiries and, for a new
            site, the site secret

        Raises:
            HostedAppNotFoundError: If the application does not exist
            LicenseNotFoundError: If the license does not exist
            LicenseNotIssuedError: If the license is not issued
            ForbiddenError: If the license cannot be served to the application
            DomainLimitReachedError: If a new site would exceed the quota
            AuthFailureError: If a known site fails authentication
        """
        try:
            result = self._handle(command)
        except DomainException as e:
            license_activations_total.labels(outcome=e.code).inc()
            raise
        license_activations_total.labels(
            outcome="provisioned" if result.site_secret else "verified"
        ).inc()
        return result

    def _handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        site = SiteURL.parse(command.domain)
        app = HostedAppResolver.resolve(
            self.hosted_app_repository, command.app_type, command.app_slug
        )

        license = self.license_repository.find_by_service_and_key(
            command.service_id, command.license_key
        )
        if license is None:
            raise LicenseNotFoundError()
        if not license.is_issued():
            raise LicenseNotIssuedError()

        ttl = getattr(settings, "DOWNLOAD_TOKEN_TTL_SECONDS", DEFAULT_TTL_SECONDS)

        def activate(current):
            current.can_serve_license(app.app_type, app.id, self.clock.now())
            site_secret: Optional[str] = None
            if current.is_new_domain(site.host):
                current, site_secret = self.domain_secret_service.provision(current, site.origin)
            else:
                self.domain_secret_service.verify(current, site.host, command.credential)
            issued = self.download_token_service.issue_token(current, ttl)
            return current, site_secret, issued

        license, site_secret, issued = run_with_conflict_retry(
            license, self.license_repository, activate
        )

        event_bus.publish(
            LicenseActivated(
                license_id=license.id,
                domain=site.host,
                is_new_domain=site_secret is not None,
            )
        )
        logger.info(
            "License activated",
            extra={
                "license_id": license.id,
                "license_key": license.partial_key(),
                "domain": site.host,
                "new_domain": site_secret is not None,
            },
        )

        return ActivateLicenseResponseDTO(
            license_id=license.id,
            domain=site.host,
            status=license.get_status(self.clock.now()),
            download_token=issued.token,
            token_expiry=issued.expiry,
            license_expiry=license.end_date,
            active_domains=license.get_total_active_domains(),
            site_secret=site_secret,
            message="License activated successfully",
        )
