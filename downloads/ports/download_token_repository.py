"""
Download token repository port (interface).

This defines the contract for download token persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from downloads.domain.download_token import DownloadToken


class DownloadTokenRepository(ABC):
    """
    Abstract repository for DownloadToken entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, token: DownloadToken) -> DownloadToken:
        """
        Insert a download token record.

        Args:
            token: Unsaved DownloadToken entity

        Returns:
            Saved entity (with id assigned)

        Raises:
            PersistenceError: If the store rejects the write
        """
        pass

    @abstractmethod
    def find_by_stored_token(self, stored_token: str) -> Optional[DownloadToken]:
        """
        Find a record by the keyed hash of its raw token.

        Args:
            stored_token: Keyed hash of the raw token

        Returns:
            DownloadToken entity or None if not found
        """
        pass

    @abstractmethod
    def delete(self, token_id: int) -> bool:
        """
        Delete a record.

        Args:
            token_id: Record id

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    def delete_by_license_key(self, license_key: str) -> int:
        """
        Delete every record issued for a license.

        Args:
            license_key: License key

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    def delete_expired(self, now_ts: int) -> int:
        """
        Delete records whose expiry has passed.

        Args:
            now_ts: Current unix timestamp

        Returns:
            Number of rows deleted
        """
        pass
