"""
DownloadToken model.
"""
from django.db import models


class DownloadToken(models.Model):
    """
    Server-side record of an issued download token.

    ``stored_token`` is the keyed hash of the raw token, never the raw token.
    ``expiry`` is a unix timestamp (0 for no expiry).
    """

    app_type = models.CharField(max_length=20)
    app_slug = models.SlugField(max_length=100)
    license_key = models.CharField(max_length=255, db_index=True)
    stored_token = models.CharField(max_length=64, unique=True)
    expiry = models.BigIntegerField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "download_tokens"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["app_type", "app_slug"]),
        ]

    def __str__(self):
        return f"Download token {self.id} ({self.app_type}/{self.app_slug})"
