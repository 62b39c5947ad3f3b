"""
DeactivateLicenseCommand.

Command to deactivate a license from an activated site.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DeactivateLicenseCommand:
    """Command to deactivate a license."""

    service_id: str
    license_key: str
    domain: str
    credential: Optional[str] = None
