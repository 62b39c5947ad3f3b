"""
Plugin, Theme and Software models.

Each variant has its own table with an identical shape.
"""
from typing import Dict, Type

from django.db import models

from core.domain.value_objects import AppType


class HostedAppBase(models.Model):
    """Common columns of every hosted application table."""

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
    ]

    name = models.CharField(max_length=255, help_text="Application display name")
    slug = models.SlugField(max_length=100, unique=True, help_text="URL-safe identifier")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.slug})"


class Plugin(HostedAppBase):
    """A licensable plugin."""

    class Meta(HostedAppBase.Meta):
        db_table = "hosted_plugins"


class Theme(HostedAppBase):
    """A licensable theme."""

    class Meta(HostedAppBase.Meta):
        db_table = "hosted_themes"


class Software(HostedAppBase):
    """A licensable standalone software package."""

    class Meta(HostedAppBase.Meta):
        db_table = "hosted_software"
        verbose_name_plural = "software"


HOSTED_APP_MODELS: Dict[AppType, Type[HostedAppBase]] = {
    AppType.PLUGIN: Plugin,
    AppType.THEME: Theme,
    AppType.SOFTWARE: Software,
}
