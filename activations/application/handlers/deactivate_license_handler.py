"""
DeactivateLicenseHandler.

Handler for deactivating a license from an activated site.
"""

import logging

from activations.application.commands.deactivate_license import DeactivateLicenseCommand
from activations.application.dto.activation_dto import DeactivateLicenseResponseDTO
from activations.application.services.license_write_retry import run_with_conflict_retry
from activations.domain.domain_secret import DomainSecretService
from activations.domain.events import LicenseDeactivated
from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, SiteURL
from core.infrastructure.events import event_bus
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DeactivateLicenseHandler:
    """Handler for DeactivateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        domain_secret_service: DomainSecretService,
    ):
        """Initialize handler with repository and services."""
        self.license_repository = license_repository
        self.domain_secret_service = domain_secret_service

    def handle(self, command: DeactivateLicenseCommand) -> DeactivateLicenseResponseDTO:
        """
        Handle deactivate license command.

        The site must authenticate first. Deactivating an already
        deactivated license succeeds without writing anything. Activated
        domains are kept.

        Args:
            command: DeactivateLicenseCommand

        Returns:
            DeactivateLicenseResponseDTO

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

        def deactivate(current):
            self.domain_secret_service.verify(current, site.host, command.credential)
            if current.is_deactivated():
                return current, True
            return LicenseLifecycleManager.deactivate(current, self.license_repository), False

        license, already_deactivated = run_with_conflict_retry(
            license, self.license_repository, deactivate
        )

        if already_deactivated:
            return DeactivateLicenseResponseDTO(
                license_id=license.id,
                domain=site.host,
                status=LicenseStatus.DEACTIVATED.value,
                already_deactivated=True,
                message="License is already deactivated",
            )

        event_bus.publish(LicenseDeactivated(license_id=license.id, domain=site.host))
        logger.info(
            "License deactivated",
            extra={"license_id": license.id, "license_key": license.partial_key(), "domain": site.host},
        )
        return DeactivateLicenseResponseDTO(
            license_id=license.id,
            domain=site.host,
            status=license.get_status(),
            already_deactivated=False,
            message="License deactivated successfully",
        )
