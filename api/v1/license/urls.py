"""
License API URLs.
"""
from django.urls import path

from api.v1.license.views import (
    ActivateLicenseView,
    DeactivateLicenseView,
    DownloadReauthView,
    LicenseValidityTestView,
    UninstallLicenseView,
)

app_name = "license"

urlpatterns = [
    path("activate", ActivateLicenseView.as_view(), name="activate"),
    path("deactivate", DeactivateLicenseView.as_view(), name="deactivate"),
    path("uninstall", UninstallLicenseView.as_view(), name="uninstall"),
    path("validity-test", LicenseValidityTestView.as_view(), name="validity-test"),
    path("download-reauth", DownloadReauthView.as_view(), name="download-reauth"),
]
