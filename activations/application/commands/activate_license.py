"""
ActivateLicenseCommand.

Command to activate a license on a site.
"""

from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import AppType


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license on a site."""

    service_id: str
    license_key: str
    domain: str
    app_type: AppType
    app_slug: str
    credential: Optional[str] = None
