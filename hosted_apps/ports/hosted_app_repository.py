"""
Hosted application repository port (interface).

This defines the contract for hosted application persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.domain.value_objects import AppBinding, AppType
from hosted_apps.domain.hosted_app import HostedApp


class HostedAppRepository(ABC):
    """
    Abstract repository for HostedApp entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, app: HostedApp) -> HostedApp:
        """
        Save a hosted application entity.

        Args:
            app: Entity to save

        Returns:
            Saved entity (with id assigned)
        """
        pass

    @abstractmethod
    def find_by_id(self, app_type: AppType, app_id: int) -> Optional[HostedApp]:
        """
        Find a hosted application by type and id.

        Args:
            app_type: Application variant
            app_id: Application id

        Returns:
            HostedApp entity or None if not found
        """
        pass

    @abstractmethod
    def find_by_slug(self, app_type: AppType, slug: str) -> Optional[HostedApp]:
        """
        Find a hosted application by type and slug.

        Args:
            app_type: Application variant
            slug: Application slug

        Returns:
            HostedApp entity or None if not found
        """
        pass

    def find_by_binding(self, binding: AppBinding) -> Optional[HostedApp]:
        """
        Find the hosted application a binding points at.

        Args:
            binding: (type, slug) reference

        Returns:
            HostedApp entity or None if not found
        """
        return self.find_by_slug(binding.app_type, binding.app_slug)
