"""
License API serializers.
"""

from rest_framework import serializers

from core.domain.value_objects import AppType

APP_TYPE_CHOICES = [app_type.value for app_type in AppType]


class LicenseRequestSerializer(serializers.Serializer):
    """Fields every license endpoint needs."""

    service_id = serializers.CharField(max_length=255, help_text="Service the license belongs to")
    license_key = serializers.CharField(max_length=255, help_text="Full license key")
    domain = serializers.CharField(max_length=500, help_text="Site URL or host name")


class AppLicenseRequestSerializer(LicenseRequestSerializer):
    """License request that also names the hosted application."""

    app_type = serializers.ChoiceField(choices=APP_TYPE_CHOICES, help_text="Application variant")
    app_slug = serializers.SlugField(max_length=100, help_text="Application slug")

    def validate_app_type(self, value):
        """Convert to AppType."""
        return AppType(value)


class ActivateLicenseRequestSerializer(AppLicenseRequestSerializer):
    """Serializer for activate license request."""


class DeactivateLicenseRequestSerializer(LicenseRequestSerializer):
    """Serializer for deactivate license request."""


class UninstallLicenseRequestSerializer(LicenseRequestSerializer):
    """Serializer for uninstall request."""


class LicenseValidityRequestSerializer(AppLicenseRequestSerializer):
    """Serializer for license validity test request."""


class DownloadReauthRequestSerializer(AppLicenseRequestSerializer):
    """Serializer for download re-authentication request."""

    download_token = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=True,
        help_text="Download token to renew (falls back to the X-Download-Token header)",
    )


class ActivateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for activate license response."""

    license_id = serializers.IntegerField()
    domain = serializers.CharField()
    status = serializers.CharField()
    download_token = serializers.CharField()
    token_expiry = serializers.IntegerField(help_text="Unix timestamp")
    license_expiry = serializers.DateTimeField(allow_null=True)
    active_domains = serializers.IntegerField()
    site_secret = serializers.CharField(
        required=False,
        allow_null=True,
        help_text="Returned only when the site is activated for the first time",
    )
    message = serializers.CharField()

    def to_representation(self, instance):
        """Omit the site secret unless one was issued."""
        data = super().to_representation(instance)
        if not data.get("site_secret"):
            data.pop("site_secret", None)
        return data


class DeactivateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for deactivate license response."""

    license_id = serializers.IntegerField()
    domain = serializers.CharField()
    status = serializers.CharField()
    already_deactivated = serializers.BooleanField()
    message = serializers.CharField()


class UninstallLicenseResponseSerializer(serializers.Serializer):
    """Serializer for uninstall response."""

    license_id = serializers.IntegerField()
    domain = serializers.CharField()
    removed = serializers.BooleanField()
    active_domains = serializers.IntegerField()
    message = serializers.CharField()


class LicenseValidityResponseSerializer(serializers.Serializer):
    """Serializer for license validity test response."""

    license_id = serializers.IntegerField()
    domain = serializers.CharField()
    status = serializers.CharField()
    license_expiry = serializers.DateTimeField(allow_null=True)
    token_validity = serializers.ChoiceField(choices=["valid", "invalid"])


class DownloadReauthResponseSerializer(serializers.Serializer):
    """Serializer for download re-authentication response."""

    license_id = serializers.IntegerField()
    download_token = serializers.CharField()
    token_expiry = serializers.IntegerField(help_text="Unix timestamp")
    message = serializers.CharField()
