"""
ReauthenticateDownloadCommand.

Command to exchange a valid download token for a fresh one.
"""

from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import AppType


@dataclass
class ReauthenticateDownloadCommand:
    """Command to rotate a download token."""

    service_id: str
    license_key: str
    domain: str
    app_type: AppType
    app_slug: str
    credential: Optional[str] = None
    download_token: Optional[str] = None
