"""
DownloadToken domain entity.

A download token record is the server-side half of a signed download
capability. Only a keyed hash of the random raw token is stored; the raw
value travels inside the signed token handed to the client.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import AppBinding


@dataclass(frozen=True)
class DownloadToken:
    """
    DownloadToken domain entity.

    ``expiry`` is a unix timestamp; 0 means the record never expires.
    """

    id: Optional[int]
    app_binding: AppBinding
    license_key: str
    stored_token: str
    expiry: int

    def __post_init__(self):
        """Validate download token entity."""
        if not self.license_key:
            raise ValueError("License key is required")
        if not self.stored_token:
            raise ValueError("Stored token is required")
        if self.expiry < 0:
            raise ValueError("Expiry cannot be negative")

    @classmethod
    def create(
        cls,
        app_binding: AppBinding,
        license_key: str,
        stored_token: str,
        expiry: int,
    ) -> "DownloadToken":
        """
        Create a new, unsaved DownloadToken entity.

        Args:
            app_binding: Application the token grants
            license_key: Key of the license the token was issued for
            stored_token: Keyed hash of the raw token
            expiry: Unix timestamp after which the token is unusable

        Returns:
            DownloadToken entity instance
        """
        return cls(
            id=None,
            app_binding=app_binding,
            license_key=license_key,
            stored_token=stored_token,
            expiry=expiry,
        )

    def is_expired(self, now_ts: int) -> bool:
        """
        Check if the token has expired.

        Args:
            now_ts: Current unix timestamp

        Returns:
            True if the token has an expiry and it has passed
        """
        return self.expiry > 0 and now_ts > self.expiry
