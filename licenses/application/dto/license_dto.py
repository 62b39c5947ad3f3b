"""
License DTOs for operator-facing responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information. The key is masked."""

    id: int
    service_id: str
    partial_key: str
    app: Optional[str]
    status: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    max_allowed_domains: int
    active_domains: List[str]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            id=license.id,
            service_id=license.service_id,
            partial_key=license.partial_key(),
            app=str(license.app_binding) if license.app_binding else None,
            status=license.get_status(),
            start_date=license.start_date,
            end_date=license.end_date,
            max_allowed_domains=license.max_allowed_domains,
            active_domains=sorted(license.activated_domains),
            created_at=license.created_at,
        )


@dataclass
class IssueLicenseResponseDTO:
    """DTO for issue license response. Carries the full key exactly once."""

    license_key: str
    license: LicenseDTO


@dataclass
class LicenseListDTO:
    """DTO for a page of licenses."""

    page: int
    limit: int
    total: int
    licenses: List[LicenseDTO]
