"""
IssueLicenseCommand.

Command to create a license and issue it to a hosted application.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import AppType


@dataclass
class IssueLicenseCommand:
    """Command to issue a license."""

    service_id: str
    app_type: AppType
    app_slug: str
    max_allowed_domains: int = -1
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    owner_id: int = 0
    licensee_fullname: str = ""
    key_prefix: Optional[str] = None
