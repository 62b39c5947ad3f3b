"""
UninstallLicenseCommand.

Command to remove an activated site from a license.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class UninstallLicenseCommand:
    """Command to remove a site from a license."""

    service_id: str
    license_key: str
    domain: str
    credential: Optional[str] = None
