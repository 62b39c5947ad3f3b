"""
Hosted application domain services.
"""
from core.domain.exceptions import HostedAppNotFoundError
from core.domain.value_objects import AppType
from hosted_apps.domain.hosted_app import HostedApp
from hosted_apps.ports.hosted_app_repository import HostedAppRepository


class HostedAppResolver:
    """Domain service for looking up the application a request targets."""

    @staticmethod
    def resolve(repository: HostedAppRepository, app_type: AppType, slug: str) -> HostedApp:
        """
        Find a hosted application or fail.

        Args:
            repository: Hosted application repository
            app_type: Application variant
            slug: Application slug

        Returns:
            HostedApp entity

        Raises:
            HostedAppNotFoundError: If no such application exists
        """
        app = repository.find_by_slug(app_type, slug)
        if app is None:
            raise HostedAppNotFoundError()
        return app
