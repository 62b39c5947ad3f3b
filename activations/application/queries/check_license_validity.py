"""
CheckLicenseValidityQuery.

Query for a site's license status and download token validity.
"""

from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import AppType


@dataclass
class CheckLicenseValidityQuery:
    """Query to check a license and download token from an activated site."""

    service_id: str
    license_key: str
    domain: str
    app_type: AppType
    app_slug: str
    credential: Optional[str] = None
    download_token: Optional[str] = None
