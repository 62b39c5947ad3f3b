"""
Django admin configuration for downloads app.
"""

from django.contrib import admin

from downloads.infrastructure.models import DownloadToken


@admin.register(DownloadToken)
class DownloadTokenAdmin(admin.ModelAdmin):
    """Admin interface for DownloadToken model (read-only)."""

    list_display = ["id", "app_type", "app_slug", "expiry", "created_at"]
    list_filter = ["app_type", "created_at"]
    search_fields = ["app_slug"]
    readonly_fields = ["id", "app_type", "app_slug", "license_key", "expiry", "created_at"]
    exclude = ["stored_token"]

    def has_add_permission(self, request):
        """Tokens are only issued through the API."""
        return False

    def has_change_permission(self, request, obj=None):
        """Tokens are immutable."""
        return False
