"""
Unit tests for license key generation.
"""

from django.test import override_settings

from licenses.domain.license_key import (
    LICENSE_KEY_PATTERN,
    generate_license_key,
    sanitize_prefix,
)


class TestGenerateLicenseKey:
    """Tests for generate_license_key."""

    def test_format(self):
        """Test key is prefix plus eight groups of eight."""
        key = generate_license_key("ACME")
        parts = key.split("-")
        assert parts[0] == "ACME"
        assert len(parts) == 9
        assert all(len(part) == 8 for part in parts[1:])
        assert LICENSE_KEY_PATTERN.match(key)

    def test_keys_are_unique(self):
        """Test generated keys do not repeat."""
        keys = {generate_license_key("X") for _ in range(200)}
        assert len(keys) == 200

    @override_settings(LICENSE_KEY_PREFIX="cfg")
    def test_default_prefix_from_settings(self):
        """Test the configured prefix is used by default."""
        assert generate_license_key().startswith("CFG-")


class TestSanitizePrefix:
    """Tests for sanitize_prefix."""

    def test_strips_and_uppercases(self):
        """Test non-alphanumerics are dropped."""
        assert sanitize_prefix("my-brand_1") == "MYBRAND1"

    def test_empty_falls_back(self):
        """Test an unusable prefix falls back to LIC."""
        assert sanitize_prefix("--") == "LIC"


class TestLicenseKeyPattern:
    """Tests for LICENSE_KEY_PATTERN."""

    def test_rejects_lowercase_and_short_groups(self):
        """Test malformed keys."""
        assert not LICENSE_KEY_PATTERN.match("lic-aaaaaaaa")
        assert not LICENSE_KEY_PATTERN.match("LIC-AAAA")
        assert not LICENSE_KEY_PATTERN.match("")
