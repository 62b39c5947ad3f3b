"""
License model.
"""
from django.db import models
from django.db.models import Q

from licenses.infrastructure.activation_map_codec import empty_activation_map


class License(models.Model):
    """
    A license grants one hosted application to a bounded number of domains.

    ``status`` is blank when the effective status is derived from the dates.
    ``activation_map`` holds the versioned activated-domain document.
    ``version`` is bumped on every write and guards conditional updates.
    """

    STATUS_CHOICES = [
        ("", "Derived from dates"),
        ("active", "Active"),
        ("expired", "Expired"),
        ("lifetime", "Lifetime"),
        ("inactive", "Inactive"),
        ("pending", "Pending"),
        ("suspended", "Suspended"),
        ("revoked", "Revoked"),
        ("deactivated", "Deactivated"),
    ]

    APP_TYPE_CHOICES = [
        ("plugin", "Plugin"),
        ("theme", "Theme"),
        ("software", "Software"),
    ]

    license_key = models.CharField(max_length=255, unique=True)
    service_id = models.CharField(max_length=255, db_index=True)
    owner_id = models.BigIntegerField(default=0, help_text="Owning principal (0 for guests)")
    licensee_fullname = models.CharField(max_length=255, blank=True, default="")
    app_type = models.CharField(max_length=20, choices=APP_TYPE_CHOICES, blank=True, default="")
    app_slug = models.SlugField(max_length=100, blank=True, default="")
    app_id = models.BigIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, blank=True, default="")
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    max_allowed_domains = models.IntegerField(
        default=-1, help_text="-1 for unlimited, 0 for none"
    )
    activation_map = models.JSONField(default=empty_activation_map, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["service_id", "license_key"]),
            models.Index(fields=["app_type", "app_slug"]),
            models.Index(fields=["status"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_allowed_domains__gte=-1),
                name="license_max_allowed_domains_gte_minus_one",
            ),
        ]

    def __str__(self):
        return f"License {self.id} ({self.service_id})"
