"""
Unit tests for License domain entity.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    AppMismatchError,
    LicenseAlreadyDeactivatedError,
    LicenseDeactivatedError,
    LicenseExpiredError,
    LicenseNotIssuedError,
    LicenseRevokedError,
    LicenseSuspendedError,
)
from core.domain.value_objects import AppBinding, AppType
from licenses.domain.license import ActivatedDomain, License, partial_key

NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)
PLUGIN = AppBinding(AppType.PLUGIN, "seo-pro")


def issued(**fields):
    """Build a license issued to plugin 10."""
    fields.setdefault("service_id", "svc")
    fields.setdefault("license_key", "TST-AAAAAAAA-BBBBBBBB")
    return License.create(**fields).issue_to(PLUGIN, 10)


class TestLicenseStatus:
    """Tests for effective status."""

    def test_no_end_date_is_lifetime(self):
        """Test a license without end date never expires."""
        assert issued().get_status(NOW) == "lifetime"

    def test_before_start_is_pending(self):
        """Test a license that has not started yet."""
        license = issued(start_date=NOW + timedelta(days=1), end_date=NOW + timedelta(days=2))
        assert license.get_status(NOW) == "pending"

    def test_after_end_is_expired(self):
        """Test a license past its end date."""
        license = issued(end_date=NOW - timedelta(seconds=1))
        assert license.get_status(NOW) == "expired"

    def test_within_window_is_active(self):
        """Test a license inside its validity window."""
        license = issued(start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1))
        assert license.get_status(NOW) == "active"

    def test_explicit_status_wins(self):
        """Test stored status overrides dates."""
        license = issued(end_date=NOW - timedelta(days=1), status="Suspended")
        assert license.get_status(NOW) == "suspended"

    def test_invalid_status_rejected(self):
        """Test unknown status strings are rejected."""
        with pytest.raises(ValueError):
            issued(status="paused")
        with pytest.raises(ValueError):
            issued().with_status("paused")

    def test_clearing_status_derives_from_dates(self):
        """Test an empty status falls back to dates."""
        license = issued(status="revoked").with_status("")
        assert license.get_status(NOW) == "lifetime"


class TestCanServeLicense:
    """Tests for can_serve_license."""

    def test_issued_active_license_is_served(self):
        """Test the happy path raises nothing."""
        issued(end_date=NOW + timedelta(days=1)).can_serve_license(AppType.PLUGIN, 10, NOW)

    def test_not_issued(self):
        """Test unissued license fails first."""
        license = License.create(service_id="svc", status="revoked")
        with pytest.raises(LicenseNotIssuedError):
            license.can_serve_license(AppType.PLUGIN, 10, NOW)

    def test_app_mismatch_checked_before_status(self):
        """Test another app's license is rejected even if revoked."""
        license = issued(status="revoked")
        with pytest.raises(AppMismatchError):
            license.can_serve_license(AppType.PLUGIN, 11, NOW)

    @pytest.mark.parametrize("app_type", [AppType.THEME, AppType.SOFTWARE])
    def test_same_id_other_type_is_mismatch(self, app_type):
        """Test application ids are only unique within a type."""
        license = issued(end_date=NOW + timedelta(days=1))
        with pytest.raises(AppMismatchError):
            license.can_serve_license(app_type, 10, NOW)

    @pytest.mark.parametrize(
        "status,error",
        [
            ("expired", LicenseExpiredError),
            ("suspended", LicenseSuspendedError),
            ("revoked", LicenseRevokedError),
            ("deactivated", LicenseDeactivatedError),
        ],
    )
    def test_blocking_statuses(self, status, error):
        """Test each blocking status has its own error."""
        with pytest.raises(error):
            issued(status=status).can_serve_license(AppType.PLUGIN, 10, NOW)

    @pytest.mark.parametrize("status", ["active", "lifetime", "inactive", "pending"])
    def test_non_blocking_statuses(self, status):
        """Test other statuses are served."""
        issued(status=status).can_serve_license(AppType.PLUGIN, 10, NOW)

    def test_derived_expiry_blocks(self):
        """Test expiry derived from dates blocks too."""
        with pytest.raises(LicenseExpiredError):
            issued(end_date=NOW - timedelta(days=1)).can_serve_license(AppType.PLUGIN, 10, NOW)


class TestDomains:
    """Tests for the activation map and quota."""

    def test_with_active_domain_normalizes_host(self):
        """Test host identity is case-insensitive."""
        license = issued().with_active_domain("https://Example.com/shop", "h1")
        assert not license.is_new_domain("example.COM")
        assert license.get_active_domain("http://example.com") == ActivatedDomain(
            origin="https://example.com", secret_hash="h1"
        )

    def test_transitions_do_not_mutate(self):
        """Test the original license is unchanged."""
        license = issued()
        license.with_active_domain("a.com", "h")
        assert license.get_total_active_domains() == 0

    def test_without_active_domain(self):
        """Test removing a domain."""
        license = issued().with_active_domain("a.com", "h").with_active_domain("b.com", "h")
        license = license.without_active_domain("A.com")
        assert sorted(license.activated_domains) == ["b.com"]

    def test_unlimited_never_reached(self):
        """Test -1 is unlimited."""
        license = issued(max_allowed_domains=-1)
        for i in range(20):
            license = license.with_active_domain(f"site{i}.com", "h")
        assert not license.has_reached_max_allowed_domains()

    def test_zero_is_always_reached(self):
        """Test 0 allows no domains."""
        assert issued(max_allowed_domains=0).has_reached_max_allowed_domains()

    def test_quota_reached_at_limit(self):
        """Test the quota boundary."""
        license = issued(max_allowed_domains=2).with_active_domain("a.com", "h")
        assert not license.has_reached_max_allowed_domains()
        license = license.with_active_domain("b.com", "h")
        assert license.has_reached_max_allowed_domains()

    def test_max_allowed_domains_below_minus_one_rejected(self):
        """Test the lower bound of the quota."""
        with pytest.raises(ValueError):
            issued(max_allowed_domains=-2)


class TestTransitions:
    """Tests for lifecycle transitions."""

    def test_deactivate_keeps_domains(self):
        """Test deactivation leaves the activation map alone."""
        license = issued().with_active_domain("a.com", "h").deactivate()
        assert license.get_status() == "deactivated"
        assert license.get_total_active_domains() == 1

    def test_deactivate_twice_raises(self):
        """Test deactivating an already deactivated license."""
        with pytest.raises(LicenseAlreadyDeactivatedError):
            issued(status="deactivated").deactivate()

    def test_issue_requires_binding_and_id_together(self):
        """Test app binding and app id are set as a pair."""
        with pytest.raises(ValueError):
            License(id=None, license_key="k", service_id="svc", app_binding=PLUGIN)

    def test_partial_key(self):
        """Test key masking keeps the last 12 characters."""
        key = "TST-AAAAAAAA-BBBBBBBB-CCCCCCCC"
        assert partial_key(key) == "****-****-****-****-BBB-CCCCCCCC"
        assert issued(license_key=key).partial_key() == partial_key(key)
