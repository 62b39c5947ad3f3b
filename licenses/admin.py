"""
Django admin configuration for licenses app.

Licenses are read-only here. Changes go through admin actions that call
the application handlers so the version check and cache invalidation
apply to admin edits too.
"""
from django.contrib import admin, messages
from django.utils.html import format_html

from core.domain.exceptions import DomainException
from core.infrastructure.cache_adapters import cache_adapter
from licenses.application.commands.regenerate_license_key import RegenerateLicenseKeyCommand
from licenses.application.commands.update_license_status import UpdateLicenseStatusCommand
from licenses.application.handlers.license_lifecycle_handlers import (
    RegenerateLicenseKeyHandler,
    UpdateLicenseStatusHandler,
)
from licenses.domain.license import partial_key
from licenses.infrastructure.models import License
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)


def _repository():
    return CachedLicenseRepository(DjangoLicenseRepository(), cache_adapter)


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "id",
        "masked_key",
        "service_id",
        "app_display",
        "status_display",
        "max_allowed_domains",
        "domains_used",
        "end_date",
        "created_at",
    ]
    list_filter = ["status", "app_type", "end_date", "created_at"]
    search_fields = ["service_id", "app_slug", "licensee_fullname"]
    actions = ["suspend_licenses", "revoke_licenses", "clear_status", "regenerate_keys"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "service_id", "owner_id", "licensee_fullname", "status"),
            },
        ),
        (
            "Application",
            {
                "fields": ("app_type", "app_slug", "app_id"),
            },
        ),
        (
            "Validity",
            {
                "fields": ("start_date", "end_date", "max_allowed_domains", "activation_map"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("version", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        """Every field is read-only."""
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        """Licenses are issued with the issue_license command."""
        return False

    def masked_key(self, obj):
        """Display the masked license key."""
        return partial_key(obj.license_key)

    masked_key.short_description = "License key"

    def app_display(self, obj):
        """Display the application binding."""
        if not obj.app_type:
            return "-"
        return f"{obj.app_type}/{obj.app_slug}"

    app_display.short_description = "Application"

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "lifetime": "green",
            "suspended": "orange",
            "revoked": "red",
            "deactivated": "red",
            "expired": "gray",
        }
        status = obj.status or "derived"
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, "black"),
            status.upper(),
        )

    status_display.short_description = "Status"

    def domains_used(self, obj):
        """Display number of activated domains."""
        return len((obj.activation_map or {}).get("domains", {}))

    domains_used.short_description = "Domains Used"

    def _set_status(self, request, queryset, status):
        handler = UpdateLicenseStatusHandler(_repository())
        updated = 0
        for license_id in queryset.values_list("id", flat=True):
            try:
                handler.handle(UpdateLicenseStatusCommand(license_id=license_id, status=status))
                updated += 1
            except DomainException as e:
                self.message_user(request, f"License {license_id}: {e.message}", messages.ERROR)
        self.message_user(request, f"Updated {updated} license(s)")

    @admin.action(description="Suspend selected licenses")
    def suspend_licenses(self, request, queryset):
        """Suspend the selected licenses."""
        self._set_status(request, queryset, "suspended")

    @admin.action(description="Revoke selected licenses")
    def revoke_licenses(self, request, queryset):
        """Revoke the selected licenses."""
        self._set_status(request, queryset, "revoked")

    @admin.action(description="Derive status from dates")
    def clear_status(self, request, queryset):
        """Clear the explicit status of the selected licenses."""
        self._set_status(request, queryset, "")

    @admin.action(description="Regenerate license keys")
    def regenerate_keys(self, request, queryset):
        """Give the selected licenses new keys."""
        handler = RegenerateLicenseKeyHandler(_repository())
        for license_id in queryset.values_list("id", flat=True):
            try:
                license = handler.handle(RegenerateLicenseKeyCommand(license_id=license_id))
            except DomainException as e:
                self.message_user(request, f"License {license_id}: {e.message}", messages.ERROR)
                continue
            self.message_user(request, f"License {license_id}: new key {license.license_key}")
