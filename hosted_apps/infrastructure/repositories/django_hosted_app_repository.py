"""
Django implementation of HostedAppRepository port.

This adapter converts between domain entities and Django ORM models.
"""

from typing import Optional

from core.domain.value_objects import AppType, Slug
from hosted_apps.domain.hosted_app import HOSTED_APP_CLASSES, HostedApp
from hosted_apps.infrastructure.models import HOSTED_APP_MODELS, HostedAppBase
from hosted_apps.ports.hosted_app_repository import HostedAppRepository


class DjangoHostedAppRepository(HostedAppRepository):
    """
    Django ORM implementation of HostedAppRepository.

    The variant's model and entity class are both looked up by AppType.
    """

    def _to_domain(self, app_type: AppType, model: HostedAppBase) -> HostedApp:
        """
        Convert Django model to domain entity.

        Args:
            app_type: Variant the model belongs to
            model: Django model instance

        Returns:
            HostedApp domain entity of the matching variant
        """
        return HOSTED_APP_CLASSES[app_type](
            id=model.id,
            name=model.name,
            slug=Slug(model.slug),
            status=model.status,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def save(self, app: HostedApp) -> HostedApp:
        """
        Save a hosted application entity.

        Args:
            app: Entity to save

        Returns:
            Saved entity (with id assigned)
        """
        model_class = HOSTED_APP_MODELS[app.app_type]
        if app.id is not None:
            model, _ = model_class.objects.update_or_create(
                id=app.id,
                defaults={"name": app.name, "slug": str(app.slug), "status": app.status},
            )
        else:
            model = model_class.objects.create(
                name=app.name, slug=str(app.slug), status=app.status
            )
        return self._to_domain(app.app_type, model)

    def find_by_id(self, app_type: AppType, app_id: int) -> Optional[HostedApp]:
        """
        Find a hosted application by type and id.

        Args:
            app_type: Application variant
            app_id: Application id

        Returns:
            HostedApp entity or None if not found
        """
        model_class = HOSTED_APP_MODELS[app_type]
        try:
            return self._to_domain(app_type, model_class.objects.get(id=app_id))
        except model_class.DoesNotExist:
            return None

    def find_by_slug(self, app_type: AppType, slug: str) -> Optional[HostedApp]:
        """
        Find a hosted application by type and slug.

        Args:
            app_type: Application variant
            slug: Application slug

        Returns:
            HostedApp entity or None if not found
        """
        model_class = HOSTED_APP_MODELS[app_type]
        try:
            return self._to_domain(app_type, model_class.objects.get(slug=slug))
        except model_class.DoesNotExist:
            return None
