"""
UninstallLicenseHandler.

Handler for removing an activated site from a license.
"""

import logging

from activations.application.commands.uninstall_license import UninstallLicenseCommand
from activations.application.dto.activation_dto import UninstallLicenseResponseDTO
from activations.application.services.license_write_retry import run_with_conflict_retry
from activations.domain.domain_secret import DomainSecretService
from activations.domain.events import LicenseUninstalled
from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import SiteURL
from core.infrastructure.events import event_bus
from licenses.domain.services import LicenseDomainManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class UninstallLicenseHandler:
    """Handler for UninstallLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        domain_secret_service: DomainSecretService,
    ):
        """Initialize handler with repository and services."""
        self.license_repository = license_repository
        self.domain_secret_service = domain_secret_service

    def handle(self, command: UninstallLicenseCommand) -> UninstallLicenseResponseDTO:
        """
        Handle uninstall command.

        Works whatever the license status, so a deactivated or expired
        license can still free its domain slots.

        Args:
            command: UninstallLicenseCommand

        Returns:
            UninstallLicenseResponseDTO with the remaining domain count

        Raises:
            LicenseNotFoundError: If the license does not exist
            AuthFailureError: If the site fails authentication
        """
        site = SiteURL.parse(command.domain)
        license = self.license_repository.find_by_service_and_key(
            command.service_id, command.license_key
        )
        if license is None:
            raise LicenseNotFoundError()

        def uninstall(current):
            self.domain_secret_service.verify(current, site.host, command.credential)
            return LicenseDomainManager.remove_activated_domain(
                current, site.host, self.license_repository
            )

        license, removed = run_with_conflict_retry(license, self.license_repository, uninstall)
        remaining = license.get_total_active_domains()

        event_bus.publish(
            LicenseUninstalled(license_id=license.id, domain=site.host, remaining_domains=remaining)
        )
        return UninstallLicenseResponseDTO(
            license_id=license.id,
            domain=site.host,
            removed=removed,
            active_domains=remaining,
            message="Domain removed from license",
        )
