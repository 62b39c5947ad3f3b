"""
DeleteLicenseCommand.

Command to delete a license and every download token issued for it.
"""
from dataclasses import dataclass


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license."""

    license_id: int
