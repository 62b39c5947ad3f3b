"""
ReauthenticateDownloadHandler.

Handler for exchanging a download token for a fresh, longer-lived one.
"""

import logging

from django.conf import settings
from django.db import transaction

from activations.application.commands.reauthenticate_download import (
    ReauthenticateDownloadCommand,
)
from activations.application.dto.activation_dto import ReauthenticateDownloadResponseDTO
from activations.domain.domain_secret import DomainSecretService
from core.domain.exceptions import DownloadTokenMissingError, LicenseNotFoundError
from core.domain.value_objects import SiteURL
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from downloads.domain.events import DownloadTokenRotated
from downloads.domain.services import DownloadTokenService
from hosted_apps.domain.services import HostedAppResolver
from hosted_apps.ports.hosted_app_repository import HostedAppRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_REAUTH_TTL_SECONDS = 14 * 24 * 60 * 60


class ReauthenticateDownloadHandler:
    """Handler for ReauthenticateDownloadCommand."""

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

    def handle(self, command: ReauthenticateDownloadCommand) -> ReauthenticateDownloadResponseDTO:
        """
        Handle download re-authentication command.

        Args:
            command: ReauthenticateDownloadCommand

        Returns:
            ReauthenticateDownloadResponseDTO with the new token

        Raises:
            HostedAppNotFoundError: If the application does not exist
            LicenseNotFoundError: If the license does not exist
            InvalidStateError: If the license is not issued
            ForbiddenError: If the license cannot be served or the token expired
            AuthFailureError: If the site or the token fails authentication
            DownloadTokenMissingError: If no download token was presented
        """
        site = SiteURL.parse(command.domain)
        app = HostedAppResolver.resolve(
            self.hosted_app_repository, command.app_type, command.app_slug
        )

        license = self.license_repository.find_by_service_and_key(
            command.service_id, command.license_key
        )
        if license is None:
            raise LicenseNotFoundError()

        license.can_serve_license(app.app_type, app.id, self.clock.now())
        self.domain_secret_service.verify(license, site.host, command.credential)

        if not command.download_token:
            raise DownloadTokenMissingError()

        ttl = getattr(settings, "DOWNLOAD_TOKEN_REAUTH_TTL_SECONDS", DEFAULT_REAUTH_TTL_SECONDS)
        with transaction.atomic():
            issued = self.download_token_service.rotate_token(
                command.download_token, license, app, ttl
            )

        event_bus.publish(
            DownloadTokenRotated(
                license_id=license.id,
                app_binding=str(app.binding),
                domain=site.host,
                expiry=issued.expiry,
            )
        )
        return ReauthenticateDownloadResponseDTO(
            license_id=license.id,
            download_token=issued.token,
            token_expiry=issued.expiry,
            message="Download token renewed",
        )
