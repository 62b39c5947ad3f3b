"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, license: License) -> License:
        """
        Save a license entity.

        A license without an id is inserted. A license with an id is written
        only if the stored version still equals ``license.version``.

        Args:
            license: License entity to save

        Returns:
            Saved license entity with its new version

        Raises:
            ConcurrentModificationError: If the stored version has moved on
            PersistenceError: If the store rejects the write
        """
        pass

    @abstractmethod
    def find_by_id(self, license_id: int) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    def find_by_service_and_key(self, service_id: str, license_key: str) -> Optional[License]:
        """
        Find a license by its service and key.

        Args:
            service_id: Service the license belongs to
            license_key: License key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    def reload(self, license_id: int) -> Optional[License]:
        """
        Read a license straight from the store, bypassing any cache.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    def license_key_exists(self, license_key: str) -> bool:
        """
        Check if a license key is already in use.

        Args:
            license_key: License key

        Returns:
            True if some license carries the key
        """
        pass

    @abstractmethod
    def update_license_key(self, license_id: int, license_key: str) -> bool:
        """
        Replace the key of a stored license.

        Args:
            license_id: License id
            license_key: New license key

        Returns:
            True if a row was updated

        Raises:
            PersistenceError: If the store rejects the write
        """
        pass

    @abstractmethod
    def delete(self, license_id: int) -> bool:
        """
        Delete a license.

        Args:
            license_id: License id

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    def list(self, page: int = 1, limit: int = 25) -> Tuple[List[License], int]:
        """
        List licenses, newest first.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (licenses on the page, total count)
        """
        pass
