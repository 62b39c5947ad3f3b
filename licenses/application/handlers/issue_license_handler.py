"""
IssueLicenseHandler.

Handler for creating a license and issuing it to a hosted application.
"""
import logging

from core.infrastructure.events import event_bus
from core.metrics import licenses_issued_total
from hosted_apps.domain.services import HostedAppResolver
from hosted_apps.ports.hosted_app_repository import HostedAppRepository
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssueLicenseResponseDTO, LicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        hosted_app_repository: HostedAppRepository,
        license_repository: LicenseRepository,
    ):
        """Initialize handler with repositories."""
        self.hosted_app_repository = hosted_app_repository
        self.license_repository = license_repository

    def handle(self, command: IssueLicenseCommand) -> IssueLicenseResponseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssueLicenseResponseDTO with the full license key

        Raises:
            HostedAppNotFoundError: If the application does not exist
            LicenseKeyGenerationError: If no unique key could be generated
            ValueError: If the license fields are invalid
        """
        app = HostedAppResolver.resolve(
            self.hosted_app_repository, command.app_type, command.app_slug
        )
        license_key = LicenseKeyGenerator.generate_unique(
            self.license_repository, prefix=command.key_prefix
        )

        license = License.create(
            service_id=command.service_id,
            license_key=license_key,
            owner_id=command.owner_id,
            licensee_fullname=command.licensee_fullname,
            max_allowed_domains=command.max_allowed_domains,
            start_date=command.start_date,
            end_date=command.end_date,
        ).issue_to(app.binding, app.id)
        license = self.license_repository.save(license)

        licenses_issued_total.labels(app_type=app.app_type.value).inc()
        event_bus.publish(
            LicenseIssued(
                license_id=license.id,
                service_id=license.service_id,
                app_binding=str(app.binding),
            )
        )
        logger.info(
            "License issued",
            extra={
                "license_id": license.id,
                "license_key": license.partial_key(),
                "app_binding": str(app.binding),
            },
        )
        return IssueLicenseResponseDTO(
            license_key=license.license_key,
            license=LicenseDTO.from_entity(license),
        )
