"""
Integration tests for the License API endpoints.
"""

import pytest
from django.urls import reverse
from rest_framework import status


def activate(api_client, body, secret=None):
    """POST an activation, optionally authenticated with a site secret."""
    headers = {"HTTP_AUTHORIZATION": f"Bearer {secret}"} if secret else {}
    return api_client.post(reverse("license:activate"), body, format="json", **headers)


@pytest.mark.django_db
@pytest.mark.integration
class TestActivateLicenseAPI:
    """Integration tests for the activate endpoint."""

    def test_first_activation(self, api_client, plugin_request, db_license):
        """Test a new site receives its secret and a download token."""
        response = activate(api_client, plugin_request)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["license_id"] == db_license.id
        assert response.data["domain"] == "example.com"
        assert response.data["status"] == "active"
        assert response.data["active_domains"] == 1
        assert response.data["site_secret"]
        assert response.data["download_token"]
        assert "X-Correlation-ID" in response

    def test_reactivation_with_secret(self, api_client, plugin_request):
        """Test a known site authenticates and gets no new secret."""
        secret = activate(api_client, plugin_request).data["site_secret"]

        response = activate(api_client, plugin_request, secret=secret)

        assert response.status_code == status.HTTP_200_OK
        assert "site_secret" not in response.data
        assert response.data["active_domains"] == 1

    def test_reactivation_without_header(self, api_client, plugin_request):
        """Test a known site must send its secret."""
        activate(api_client, plugin_request)

        response = activate(api_client, plugin_request)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["code"] == "authorization_header_not_found"

    def test_reactivation_with_wrong_secret(self, api_client, plugin_request):
        """Test a wrong site secret is rejected."""
        activate(api_client, plugin_request)

        response = activate(api_client, plugin_request, secret="d3Jvbmctc2VjcmV0")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error"]["code"] == "authorization_failed"

    def test_unknown_scheme_is_invalid_format(self, api_client, plugin_request):
        """Test a non-bearer Authorization header."""
        activate(api_client, plugin_request)

        response = api_client.post(
            reverse("license:activate"),
            plugin_request,
            format="json",
            HTTP_AUTHORIZATION="Basic dXNlcjpwYXNz",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["code"] == "invalid_token_format"

    def test_domain_limit(self, api_client, plugin_request):
        """Test a second site on a one-domain license."""
        activate(api_client, plugin_request)

        response = activate(api_client, {**plugin_request, "domain": "other.example.org"})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error"]["code"] == "max_domains_reached"

    def test_unknown_license(self, api_client, plugin_request):
        """Test a license key that does not exist."""
        response = activate(api_client, {**plugin_request, "license_key": "TST-MISSING"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"]["code"] == "license_not_found"

    def test_expired_license(self, api_client, make_license, plugin_request):
        """Test an expired license is forbidden."""
        license = make_license(status="expired")

        response = activate(api_client, {**plugin_request, "license_key": license.license_key})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error"]["code"] == "license_expired"

    def test_invalid_request(self, api_client, plugin_request):
        """Test field validation errors use the error envelope."""
        response = activate(api_client, {**plugin_request, "app_type": "widget"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["code"] == "invalid_request"
        assert "app_type" in response.data["error"]["details"]

    def test_correlation_id_is_echoed(self, api_client, plugin_request):
        """Test a client supplied correlation id is returned."""
        response = api_client.post(
            reverse("license:activate"),
            plugin_request,
            format="json",
            HTTP_X_CORRELATION_ID="req-123",
        )

        assert response["X-Correlation-ID"] == "req-123"


@pytest.mark.django_db
@pytest.mark.integration
class TestDeactivateAndUninstallAPI:
    """Integration tests for the deactivate and uninstall endpoints."""

    def _site_body(self, plugin_request):
        return {key: plugin_request[key] for key in ("service_id", "license_key", "domain")}

    def test_deactivate(self, api_client, plugin_request):
        """Test deactivation, a repeat, and a blocked reactivation."""
        secret = activate(api_client, plugin_request).data["site_secret"]
        url = reverse("license:deactivate")
        body = self._site_body(plugin_request)

        response = api_client.post(url, body, format="json", HTTP_AUTHORIZATION=f"Bearer {secret}")
        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "deactivated"
        assert response.data["already_deactivated"] is False

        response = api_client.post(url, body, format="json", HTTP_AUTHORIZATION=f"Bearer {secret}")
        assert response.status_code == status.HTTP_200_OK
        assert response.data["already_deactivated"] is True

        response = activate(api_client, plugin_request, secret=secret)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error"]["code"] == "license_deactivated"

    def test_deactivate_unknown_site(self, api_client, plugin_request):
        """Test a site that never activated cannot deactivate."""
        response = api_client.post(
            reverse("license:deactivate"),
            self._site_body(plugin_request),
            format="json",
            HTTP_AUTHORIZATION="Bearer c2VjcmV0",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error"]["code"] == "site_token_missing"

    def test_uninstall_frees_slot(self, api_client, plugin_request):
        """Test uninstall removes the site so another can activate."""
        secret = activate(api_client, plugin_request).data["site_secret"]

        response = api_client.post(
            reverse("license:uninstall"),
            self._site_body(plugin_request),
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {secret}",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["removed"] is True
        assert response.data["active_domains"] == 0
        response = activate(api_client, {**plugin_request, "domain": "other.example.org"})
        assert response.status_code == status.HTTP_200_OK


@pytest.mark.django_db
@pytest.mark.integration
class TestDownloadTokenAPI:
    """Integration tests for validity test and download re-authentication."""

    def test_validity(self, api_client, plugin_request):
        """Test a fresh download token is valid."""
        first = activate(api_client, plugin_request).data

        response = api_client.post(
            reverse("license:validity-test"),
            plugin_request,
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
            HTTP_X_DOWNLOAD_TOKEN=first["download_token"],
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["token_validity"] == "valid"

    def test_validity_with_bad_token(self, api_client, plugin_request):
        """Test a tampered download token reports invalid."""
        first = activate(api_client, plugin_request).data

        response = api_client.post(
            reverse("license:validity-test"),
            plugin_request,
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
            HTTP_X_DOWNLOAD_TOKEN=first["download_token"] + "x",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["token_validity"] == "invalid"

    def test_validity_without_token(self, api_client, plugin_request):
        """Test the download token header is required."""
        first = activate(api_client, plugin_request).data

        response = api_client.post(
            reverse("license:validity-test"),
            plugin_request,
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["code"] == "missing_download_token"

    def test_reauth(self, api_client, plugin_request):
        """Test re-authentication swaps the download token."""
        first = activate(api_client, plugin_request).data
        url = reverse("license:download-reauth")
        headers = {
            "HTTP_AUTHORIZATION": f"Bearer {first['site_secret']}",
            "HTTP_X_DOWNLOAD_TOKEN": first["download_token"],
        }

        response = api_client.post(url, plugin_request, format="json", **headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["download_token"] != first["download_token"]

        response = api_client.post(url, plugin_request, format="json", **headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"]["code"] == "download_token_not_found"

    def test_reauth_with_token_in_body(self, api_client, plugin_request):
        """Test the download token may be sent as a request field."""
        first = activate(api_client, plugin_request).data
        url = reverse("license:download-reauth")

        response = api_client.post(
            url,
            {**plugin_request, "download_token": first["download_token"]},
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
        )

        assert response.status_code == status.HTTP_200_OK
        renewed = response.data["download_token"]
        assert renewed != first["download_token"]

        response = api_client.post(
            url,
            plugin_request,
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
            HTTP_X_DOWNLOAD_TOKEN=renewed,
        )
        assert response.status_code == status.HTTP_200_OK

    def test_reauth_body_token_wins_over_header(self, api_client, plugin_request):
        """Test the request field is used when both are present."""
        first = activate(api_client, plugin_request).data

        response = api_client.post(
            reverse("license:download-reauth"),
            {**plugin_request, "download_token": first["download_token"]},
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
            HTTP_X_DOWNLOAD_TOKEN="not-a-token",
        )

        assert response.status_code == status.HTTP_200_OK

    def test_reauth_without_token(self, api_client, plugin_request):
        """Test re-authentication needs a token in the body or header."""
        first = activate(api_client, plugin_request).data

        response = api_client.post(
            reverse("license:download-reauth"),
            {**plugin_request, "download_token": ""},
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {first['site_secret']}",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["code"] == "missing_download_token"


@pytest.mark.django_db
@pytest.mark.integration
class TestServiceEndpoints:
    """Integration tests for health, readiness and metrics."""

    def test_health(self, client):
        """Test the liveness endpoint."""
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "entitlement-service"}

    def test_ready(self, client):
        """Test the readiness endpoint with database and cache up."""
        response = client.get("/ready/")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "cache": True, "signing_key": True}

    def test_metrics(self, client, api_client, plugin_request):
        """Test request metrics are exported."""
        activate(api_client, plugin_request)

        response = client.get("/metrics/")

        assert response.status_code == 200
        assert b"http_requests_total" in response.content
        assert b"/api/v1/license/activate" in response.content
