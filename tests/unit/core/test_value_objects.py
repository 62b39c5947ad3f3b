"""
Unit tests for value objects.
"""

import pytest

from core.domain.value_objects import AppBinding, AppType, LicenseStatus, SiteURL, Slug


class TestSlug:
    """Tests for Slug value object."""

    def test_valid_slug(self):
        """Test creating valid slug."""
        slug = Slug("seo-pro_2")
        assert str(slug) == "seo-pro_2"

    def test_empty_slug_raises(self):
        """Test empty slug is rejected."""
        with pytest.raises(ValueError, match="empty"):
            Slug("")

    def test_invalid_characters_raise(self):
        """Test slug with spaces is rejected."""
        with pytest.raises(ValueError, match="Invalid slug"):
            Slug("seo pro")

    def test_equality(self):
        """Test slugs compare by value."""
        assert Slug("a") == Slug("a")
        assert Slug("a") != Slug("b")


class TestAppBinding:
    """Tests for AppBinding value object."""

    def test_str_is_type_and_slug(self):
        """Test binding serializes as type/slug."""
        binding = AppBinding(AppType.THEME, "storefront")
        assert str(binding) == "theme/storefront"

    def test_parse(self):
        """Test parsing a binding string."""
        binding = AppBinding.parse("software/desk-app")
        assert binding.app_type is AppType.SOFTWARE
        assert binding.app_slug == "desk-app"

    @pytest.mark.parametrize("value", ["", "plugin", "widget/x", "plugin/", None, 7])
    def test_parse_invalid(self, value):
        """Test parsing rejects bad bindings."""
        with pytest.raises(ValueError):
            AppBinding.parse(value)

    def test_bindings_of_different_types_differ(self):
        """Test same slug under two types is two bindings."""
        assert AppBinding(AppType.PLUGIN, "x") != AppBinding(AppType.THEME, "x")


class TestSiteURL:
    """Tests for SiteURL value object."""

    def test_host_is_lowercased(self):
        """Test host comparison is case-insensitive."""
        site = SiteURL.parse("https://Example.COM/path?q=1")
        assert site.host == "example.com"
        assert site.origin == "https://example.com"

    def test_bare_host_defaults_to_https(self):
        """Test a bare host gets an https origin."""
        site = SiteURL.parse("shop.example.org")
        assert site.host == "shop.example.org"
        assert site.origin == "https://shop.example.org"

    def test_port_kept_in_origin(self):
        """Test port is part of the origin but not the host."""
        site = SiteURL.parse("http://localhost:8080/")
        assert site.host == "localhost"
        assert site.origin == "http://localhost:8080"

    @pytest.mark.parametrize("value", ["", "   ", "https://"])
    def test_invalid(self, value):
        """Test URLs without a host are rejected."""
        with pytest.raises(ValueError):
            SiteURL.parse(value)


class TestLicenseStatus:
    """Tests for LicenseStatus."""

    def test_values(self):
        """Test the allowed status set."""
        assert LicenseStatus.values() == {
            "active",
            "expired",
            "lifetime",
            "inactive",
            "pending",
            "suspended",
            "revoked",
            "deactivated",
        }
