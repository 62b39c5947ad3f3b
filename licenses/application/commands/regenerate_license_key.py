"""
RegenerateLicenseKeyCommand.

Command to give a license a new unique key.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RegenerateLicenseKeyCommand:
    """Command to regenerate a license key."""

    license_id: int
    prefix: Optional[str] = None
