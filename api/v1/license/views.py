"""
License API views.

These endpoints are called by licensed sites to:
- Activate a license on a site
- Deactivate or uninstall a license
- Test license and download token validity
- Renew a download token

Sites authenticate with the secret they received on first activation,
sent as ``Authorization: Bearer <secret>``.
"""

from typing import Optional, Tuple

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.commands.deactivate_license import DeactivateLicenseCommand
from activations.application.commands.reauthenticate_download import (
    ReauthenticateDownloadCommand,
)
from activations.application.commands.uninstall_license import UninstallLicenseCommand
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.check_license_validity_handler import (
    CheckLicenseValidityHandler,
)
from activations.application.handlers.deactivate_license_handler import (
    DeactivateLicenseHandler,
)
from activations.application.handlers.reauthenticate_download_handler import (
    ReauthenticateDownloadHandler,
)
from activations.application.handlers.uninstall_license_handler import (
    UninstallLicenseHandler,
)
from activations.application.queries.check_license_validity import CheckLicenseValidityQuery
from activations.domain.domain_secret import DomainSecretService
from api.v1.license.serializers import (
    ActivateLicenseRequestSerializer,
    ActivateLicenseResponseSerializer,
    DeactivateLicenseRequestSerializer,
    DeactivateLicenseResponseSerializer,
    DownloadReauthRequestSerializer,
    DownloadReauthResponseSerializer,
    LicenseValidityRequestSerializer,
    LicenseValidityResponseSerializer,
    UninstallLicenseRequestSerializer,
    UninstallLicenseResponseSerializer,
)
from core.infrastructure.cache_adapters import cache_adapter
from core.infrastructure.crypto import derive_key_from_settings
from downloads.domain.services import DownloadTokenService
from downloads.infrastructure.repositories.django_download_token_repository import (
    DjangoDownloadTokenRepository,
)
from hosted_apps.infrastructure.repositories.django_hosted_app_repository import (
    DjangoHostedAppRepository,
)
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

# Initialize repositories (in production, use DI container)
_hosted_app_repo = DjangoHostedAppRepository()
_license_repo = CachedLicenseRepository(DjangoLicenseRepository(), cache_adapter)
_download_token_repo = DjangoDownloadTokenRepository()

DOWNLOAD_TOKEN_HEADER = "X-Download-Token"

SITE_AUTH_PARAMETER = OpenApiParameter(
    name="Authorization",
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Bearer site secret. Not needed when activating a new site.",
)

DOWNLOAD_TOKEN_PARAMETER = OpenApiParameter(
    name=DOWNLOAD_TOKEN_HEADER,
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Download token previously issued for the license",
)


def _services() -> Tuple[DomainSecretService, DownloadTokenService]:
    """Build the domain services with the current signing key."""
    signing_key = derive_key_from_settings()
    return (
        DomainSecretService(signing_key, _license_repo),
        DownloadTokenService(_download_token_repo, signing_key),
    )


def get_site_credential(request: Request) -> Optional[str]:
    """
    Extract the site secret from the Authorization header.

    A ``Bearer`` scheme is stripped; any other value is passed on as-is so
    that it fails format validation rather than looking absent.
    """
    header = request.headers.get("Authorization", "").strip()
    if not header:
        return None
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer":
        return value.strip()
    return header


def get_download_token(request: Request) -> Optional[str]:
    """Extract the download token header."""
    return request.headers.get(DOWNLOAD_TOKEN_HEADER, "").strip() or None


class ActivateLicenseView(APIView):
    """View for activating a license on a site."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Activate a license on a site. A site seen for the first time "
            "receives a one-time site secret; a known site must present it."
        ),
        tags=["License API"],
        parameters=[SITE_AUTH_PARAMETER],
        request=ActivateLicenseRequestSerializer,
        responses={
            200: ActivateLicenseResponseSerializer,
            400: {"description": "Bad Request or license not issued"},
            401: {"description": "Site authentication failed"},
            403: {"description": "License expired, suspended, revoked or for another application"},
            404: {"description": "License or application not found"},
            409: {"description": "Domain limit reached or license deactivated"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license."""
        serializer = ActivateLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        domain_secret_service, download_token_service = _services()
        handler = ActivateLicenseHandler(
            hosted_app_repository=_hosted_app_repo,
            license_repository=_license_repo,
            domain_secret_service=domain_secret_service,
            download_token_service=download_token_service,
        )
        result = handler.handle(
            ActivateLicenseCommand(
                service_id=data["service_id"],
                license_key=data["license_key"],
                domain=data["domain"],
                app_type=data["app_type"],
                app_slug=data["app_slug"],
                credential=get_site_credential(request),
            )
        )
        return Response(ActivateLicenseResponseSerializer(result).data, status=status.HTTP_200_OK)


class DeactivateLicenseView(APIView):
    """View for deactivating a license."""

    @extend_schema(
        operation_id="deactivate_license",
        summary="Deactivate License",
        description="Deactivate a license. Activated sites are kept on the license.",
        tags=["License API"],
        parameters=[SITE_AUTH_PARAMETER],
        request=DeactivateLicenseRequestSerializer,
        responses={
            200: DeactivateLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Site authentication failed"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Deactivate a license."""
        serializer = DeactivateLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        domain_secret_service, _ = _services()
        handler = DeactivateLicenseHandler(
            license_repository=_license_repo,
            domain_secret_service=domain_secret_service,
        )
        result = handler.handle(
            DeactivateLicenseCommand(
                service_id=data["service_id"],
                license_key=data["license_key"],
                domain=data["domain"],
                credential=get_site_credential(request),
            )
        )
        return Response(DeactivateLicenseResponseSerializer(result).data, status=status.HTTP_200_OK)


class UninstallLicenseView(APIView):
    """View for removing a site from a license."""

    @extend_schema(
        operation_id="uninstall_license",
        summary="Uninstall License",
        description="Remove the calling site from the license, freeing its domain slot.",
        tags=["License API"],
        parameters=[SITE_AUTH_PARAMETER],
        request=UninstallLicenseRequestSerializer,
        responses={
            200: UninstallLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Site authentication failed"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Uninstall a license from a site."""
        serializer = UninstallLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        domain_secret_service, _ = _services()
        handler = UninstallLicenseHandler(
            license_repository=_license_repo,
            domain_secret_service=domain_secret_service,
        )
        result = handler.handle(
            UninstallLicenseCommand(
                service_id=data["service_id"],
                license_key=data["license_key"],
                domain=data["domain"],
                credential=get_site_credential(request),
            )
        )
        return Response(UninstallLicenseResponseSerializer(result).data, status=status.HTTP_200_OK)


class LicenseValidityTestView(APIView):
    """View for testing license and download token validity."""

    @extend_schema(
        operation_id="license_validity_test",
        summary="License Validity Test",
        description=(
            "Report the license status and expiry, and whether the presented "
            "download token is valid for the application."
        ),
        tags=["License API"],
        parameters=[SITE_AUTH_PARAMETER, DOWNLOAD_TOKEN_PARAMETER],
        request=LicenseValidityRequestSerializer,
        responses={
            200: LicenseValidityResponseSerializer,
            400: {"description": "Bad Request or missing download token"},
            401: {"description": "Site authentication failed"},
            404: {"description": "License or application not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Test license validity."""
        serializer = LicenseValidityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        domain_secret_service, download_token_service = _services()
        handler = CheckLicenseValidityHandler(
            hosted_app_repository=_hosted_app_repo,
            license_repository=_license_repo,
            domain_secret_service=domain_secret_service,
            download_token_service=download_token_service,
        )
        result = handler.handle(
            CheckLicenseValidityQuery(
                service_id=data["service_id"],
                license_key=data["license_key"],
                domain=data["domain"],
                app_type=data["app_type"],
                app_slug=data["app_slug"],
                credential=get_site_credential(request),
                download_token=get_download_token(request),
            )
        )
        return Response(LicenseValidityResponseSerializer(result).data, status=status.HTTP_200_OK)


class DownloadReauthView(APIView):
    """View for renewing a download token."""

    @extend_schema(
        operation_id="download_reauth",
        summary="Download Re-authentication",
        description=(
            "Exchange a valid download token for a fresh one. The token is "
            "read from the download_token body field, or from the "
            "X-Download-Token header when the field is absent. The presented "
            "token is invalidated."
        ),
        tags=["License API"],
        parameters=[SITE_AUTH_PARAMETER, DOWNLOAD_TOKEN_PARAMETER],
        request=DownloadReauthRequestSerializer,
        responses={
            200: DownloadReauthResponseSerializer,
            400: {"description": "Bad Request or missing download token"},
            401: {"description": "Site or token authentication failed"},
            403: {"description": "License cannot be served or token expired"},
            404: {"description": "License, application or token not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Renew a download token."""
        serializer = DownloadReauthRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        domain_secret_service, download_token_service = _services()
        handler = ReauthenticateDownloadHandler(
            hosted_app_repository=_hosted_app_repo,
            license_repository=_license_repo,
            domain_secret_service=domain_secret_service,
            download_token_service=download_token_service,
        )
        result = handler.handle(
            ReauthenticateDownloadCommand(
                service_id=data["service_id"],
                license_key=data["license_key"],
                domain=data["domain"],
                app_type=data["app_type"],
                app_slug=data["app_slug"],
                credential=get_site_credential(request),
                download_token=data.get("download_token") or get_download_token(request),
            )
        )
        return Response(DownloadReauthResponseSerializer(result).data, status=status.HTTP_200_OK)
