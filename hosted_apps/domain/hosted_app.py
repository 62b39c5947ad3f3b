"""
Hosted application domain entities.

A hosted application is the thing a license is issued for. There are three
variants, Plugin, Theme and Software, which share one shape and differ only
in their type tag.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Dict, Optional, Type

from django.utils import timezone

from core.domain.value_objects import AppBinding, AppType, Slug


@dataclass(frozen=True)
class HostedApp:
    """
    Hosted application domain entity.

    Use a concrete variant (Plugin, Theme, Software); the base class has
    no type tag.
    """

    app_type: ClassVar[AppType]

    id: Optional[int]
    name: str
    slug: Slug
    status: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate hosted application entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Application name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Application name too long")

    @classmethod
    def create(
        cls,
        name: str,
        slug: str,
        status: str = "active",
        app_id: Optional[int] = None,
    ) -> "HostedApp":
        """
        Create a new hosted application entity.

        Args:
            name: Display name
            slug: URL-safe identifier, unique per variant
            status: Publication status
            app_id: Optional id (assigned by the store if not provided)

        Returns:
            Entity of the variant this is called on
        """
        now = timezone.now()
        return cls(
            id=app_id,
            name=name.strip(),
            slug=Slug(slug),
            status=status,
            created_at=now,
            updated_at=now,
        )

    @property
    def binding(self) -> AppBinding:
        """Return the (type, slug) reference to this application."""
        return AppBinding(app_type=self.app_type, app_slug=str(self.slug))


@dataclass(frozen=True)
class Plugin(HostedApp):
    """A licensable plugin."""

    app_type: ClassVar[AppType] = AppType.PLUGIN


@dataclass(frozen=True)
class Theme(HostedApp):
    """A licensable theme."""

    app_type: ClassVar[AppType] = AppType.THEME


@dataclass(frozen=True)
class Software(HostedApp):
    """A licensable standalone software package."""

    app_type: ClassVar[AppType] = AppType.SOFTWARE


HOSTED_APP_CLASSES: Dict[AppType, Type[HostedApp]] = {
    AppType.PLUGIN: Plugin,
    AppType.THEME: Theme,
    AppType.SOFTWARE: Software,
}
