"""
CheckLicenseValidityHandler.

Handler for a site's license and download token check.
"""

import logging

from activations.application.dto.activation_dto import LicenseValidityDTO
from activations.application.queries.check_license_validity import CheckLicenseValidityQuery
from activations.domain.domain_secret import DomainSecretService
from activations.domain.events import LicenseValidityChecked
from core.domain.exceptions import (
    DomainException,
    DownloadTokenMissingError,
    LicenseNotFoundError,
)
from core.domain.value_objects import SiteURL
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from downloads.domain.services import DownloadTokenService
from hosted_apps.domain.services import HostedAppResolver
from hosted_apps.ports.hosted_app_repository import HostedAppRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class CheckLicenseValidityHandler:
    """Handler for CheckLicenseValidityQuery."""

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

    def handle(self, query: CheckLicenseValidityQuery) -> LicenseValidityDTO:
        """
        Handle license validity query.

        A bad download token is reported as ``invalid`` rather than raised.

        Args:
            query: CheckLicenseValidityQuery

        Returns:
            LicenseValidityDTO

        Raises:
            HostedAppNotFoundError: If the application does not exist
            LicenseNotFoundError: If the license does not exist
            AuthFailureError: If the site fails authentication
            DownloadTokenMissingError: If no download token was presented
        """
        site = SiteURL.parse(query.domain)
        app = HostedAppResolver.resolve(self.hosted_app_repository, query.app_type, query.app_slug)

        license = self.license_repository.find_by_service_and_key(
            query.service_id, query.license_key
        )
        if license is None:
            raise LicenseNotFoundError()

        self.domain_secret_service.verify(license, site.host, query.credential)

        if not query.download_token:
            raise DownloadTokenMissingError()

        try:
            self.download_token_service.verify_token_for_app(query.download_token, app)
            token_valid = True
        except DomainException as e:
            logger.info(
                "Download token failed validity test",
                extra={"license_id": license.id, "reason": e.code},
            )
            token_valid = False

        status = license.get_status(self.clock.now())
        event_bus.publish(
            LicenseValidityChecked(
                license_id=license.id,
                domain=site.host,
                status=status,
                token_valid=token_valid,
            )
        )
        return LicenseValidityDTO(
            license_id=license.id,
            domain=site.host,
            status=status,
            license_expiry=license.end_date,
            token_validity="valid" if token_valid else "invalid",
        )
