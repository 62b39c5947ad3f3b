"""
UpdateLicenseStatusCommand.

Command to set or clear a license's explicit status.
"""
from dataclasses import dataclass


@dataclass
class UpdateLicenseStatusCommand:
    """Command to change a license's explicit status ("" derives it from dates)."""

    license_id: int
    status: str
