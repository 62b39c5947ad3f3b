"""
License lifecycle handlers.

Handlers for status changes, key regeneration and deletion.
"""
import logging

from django.db import transaction

from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.events import event_bus
from downloads.domain.services import DownloadTokenService
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.regenerate_license_key import RegenerateLicenseKeyCommand
from licenses.application.commands.update_license_status import UpdateLicenseStatusCommand
from licenses.domain.events import LicenseDeleted, LicenseKeyRegenerated, LicenseStatusChanged
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator, LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class UpdateLicenseStatusHandler:
    """Handler for UpdateLicenseStatusCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    def handle(self, command: UpdateLicenseStatusCommand) -> License:
        """
        Handle update status command.

        Args:
            command: UpdateLicenseStatusCommand

        Returns:
            Updated License entity

        Raises:
            LicenseNotFoundError: If license not found
            ValueError: If the status is not allowed
        """
        license = self.license_repository.reload(command.license_id)
        if not license:
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        old_status = license.get_status()
        updated = LicenseLifecycleManager.set_status(
            license, command.status, self.license_repository
        )

        event_bus.publish(
            LicenseStatusChanged(
                license_id=updated.id,
                old_status=old_status,
                new_status=updated.get_status(),
            )
        )
        return updated


class RegenerateLicenseKeyHandler:
    """Handler for RegenerateLicenseKeyCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    def handle(self, command: RegenerateLicenseKeyCommand) -> License:
        """
        Handle regenerate key command.

        Args:
            command: RegenerateLicenseKeyCommand

        Returns:
            License entity carrying the new key

        Raises:
            LicenseNotFoundError: If license not found
            LicenseKeyGenerationError: If no unique key could be generated
            PersistenceError: If the new key could not be saved
        """
        license = self.license_repository.reload(command.license_id)
        if not license:
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        with transaction.atomic():
            regenerated = LicenseKeyGenerator.regenerate(
                license, self.license_repository, prefix=command.prefix
            )

        event_bus.publish(
            LicenseKeyRegenerated(license_id=regenerated.id, partial_key=regenerated.partial_key())
        )
        return regenerated


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        download_token_service: DownloadTokenService,
    ):
        """Initialize handler with repository and token service."""
        self.license_repository = license_repository
        self.download_token_service = download_token_service

    def handle(self, command: DeleteLicenseCommand) -> int:
        """
        Handle delete license command.

        The license and its download tokens are removed together.

        Args:
            command: DeleteLicenseCommand

        Returns:
            Number of download tokens deleted with the license

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = self.license_repository.reload(command.license_id)
        if not license:
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        with transaction.atomic():
            tokens_deleted = self.download_token_service.revoke_for_license(license)
            self.license_repository.delete(license.id)

        event_bus.publish(LicenseDeleted(license_id=license.id, tokens_deleted=tokens_deleted))
        logger.info(
            "License deleted",
            extra={
                "license_id": license.id,
                "license_key": license.partial_key(),
                "tokens_deleted": tokens_deleted,
            },
        )
        return tokens_deleted
