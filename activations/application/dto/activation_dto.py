"""
Activation DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for activate license response."""

    license_id: int
    domain: str
    status: str
    download_token: str
    token_expiry: int
    license_expiry: Optional[datetime]
    active_domains: int
    site_secret: Optional[str]
    message: str


@dataclass
class DeactivateLicenseResponseDTO:
    """DTO for deactivate license response."""

    license_id: int
    domain: str
    status: str
    already_deactivated: bool
    message: str


@dataclass
class UninstallLicenseResponseDTO:
    """DTO for uninstall response."""

    license_id: int
    domain: str
    removed: bool
    active_domains: int
    message: str


@dataclass
class LicenseValidityDTO:
    """DTO for license validity test response."""

    license_id: int
    domain: str
    status: str
    license_expiry: Optional[datetime]
    token_validity: str


@dataclass
class ReauthenticateDownloadResponseDTO:
    """DTO for download re-authentication response."""

    license_id: int
    download_token: str
    token_expiry: int
    message: str
