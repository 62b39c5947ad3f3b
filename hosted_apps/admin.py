"""
Django admin configuration for hosted_apps app.
"""

from django.contrib import admin

from hosted_apps.infrastructure.models import Plugin, Software, Theme


@admin.register(Plugin, Theme, Software)
class HostedAppAdmin(admin.ModelAdmin):
    """Admin interface shared by every hosted application variant."""

    list_display = ["name", "slug", "status", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["name", "slug"]
    readonly_fields = ["id", "created_at", "updated_at"]
    prepopulated_fields = {"slug": ("name",)}
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "slug", "status"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
