"""
Unit tests for download token issuance and verification.
"""

import json
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from core.domain.exceptions import (
    AppMismatchError,
    AuthFailureError,
    DownloadTokenExpiredError,
    DownloadTokenNotFoundError,
    InvalidTokenPayloadError,
    InvalidTokenSignatureError,
    LicenseNotIssuedError,
    MalformedTokenError,
)
from core.infrastructure.crypto import base64url_decode, base64url_encode, hmac_sha256_hex
from downloads.domain.services import RAW_TOKEN_PREFIX, DownloadTokenService, canonical_json
from hosted_apps.domain.hosted_app import Plugin, Theme
from licenses.domain.license import License

PLUGIN = Plugin.create(name="SEO Pro", slug="seo-pro", app_id=10)
THEME = Theme.create(name="Storefront", slug="seo-pro", app_id=10)


class FakeDownloadTokenRepository:
    """Dictionary-backed DownloadTokenRepository."""

    def __init__(self):
        self.records = {}
        self.next_id = 1

    def save(self, token):
        saved = replace(token, id=self.next_id)
        self.next_id += 1
        self.records[saved.id] = saved
        return saved

    def find_by_stored_token(self, stored_token):
        for record in self.records.values():
            if record.stored_token == stored_token:
                return record
        return None

    def delete(self, token_id):
        return self.records.pop(token_id, None) is not None

    def delete_by_license_key(self, license_key):
        ids = [i for i, r in self.records.items() if r.license_key == license_key]
        for token_id in ids:
            del self.records[token_id]
        return len(ids)

    def delete_expired(self, now_ts):
        ids = [i for i, r in self.records.items() if r.is_expired(now_ts)]
        for token_id in ids:
            del self.records[token_id]
        return len(ids)


@pytest.fixture
def repository():
    """Fixture for the fake token repository."""
    return FakeDownloadTokenRepository()


@pytest.fixture
def service(repository, signing_key, frozen_clock):
    """Fixture for a DownloadTokenService on a frozen clock."""
    return DownloadTokenService(repository, signing_key, clock=frozen_clock)


@pytest.fixture
def license():
    """Fixture for a license issued to the plugin."""
    return replace(
        License.create(service_id="svc", license_key="TST-AAAAAAAA").issue_to(
            PLUGIN.binding, PLUGIN.id
        ),
        id=42,
    )


def split_token(token):
    """Return (payload dict, signature) of a client token."""
    payload_json, _, signature = base64url_decode(token).rpartition(b".")
    return json.loads(payload_json), signature


class TestIssueToken:
    """Tests for DownloadTokenService.issue_token."""

    def test_payload_and_record(self, service, repository, license, frozen_clock, signing_key):
        """Test the signed payload and the stored hash."""
        issued = service.issue_token(license, expiry_seconds=3600)

        payload, _ = split_token(issued.token)
        now_ts = frozen_clock.timestamp()
        assert payload["license_id"] == 42
        assert payload["app_binding"] == "plugin/seo-pro"
        assert payload["issued_at"] == now_ts
        assert payload["expiry_ts"] == issued.expiry == now_ts + 3600
        assert payload["raw_token"].startswith(RAW_TOKEN_PREFIX)

        (record,) = repository.records.values()
        assert record.stored_token == hmac_sha256_hex(payload["raw_token"], signing_key)
        assert record.license_key == license.license_key
        assert record.expiry == issued.expiry

    def test_token_is_unpadded_base64url(self, service, license):
        """Test the client token alphabet."""
        token = service.create_token(license)
        assert "=" not in token
        assert "+" not in token and "/" not in token

    def test_default_ttl_from_settings(self, service, license, frozen_clock, settings):
        """Test the configured default lifetime."""
        settings.DOWNLOAD_TOKEN_TTL_SECONDS = 120
        issued = service.issue_token(license)
        assert issued.expiry == frozen_clock.timestamp() + 120

    def test_unissued_license(self, service):
        """Test tokens need an application."""
        with pytest.raises(LicenseNotIssuedError):
            service.issue_token(License.create(service_id="svc", license_key="K"))


class TestVerifyToken:
    """Tests for DownloadTokenService.verify_token_for_app."""

    def test_valid(self, service, license):
        """Test a fresh token verifies for its application."""
        token = service.create_token(license, 60)
        record = service.verify_token_for_app(token, PLUGIN)
        assert record.license_key == license.license_key

    def test_expired(self, service, license, frozen_clock):
        """Test a token past its expiry."""
        token = service.create_token(license, 60)
        frozen_clock.advance(seconds=60)
        service.verify_token_for_app(token, PLUGIN)
        frozen_clock.advance(seconds=1)
        with pytest.raises(DownloadTokenExpiredError):
            service.verify_token_for_app(token, PLUGIN)

    def test_other_application(self, service, license):
        """Test same slug under another type is a different application."""
        token = service.create_token(license, 60)
        with pytest.raises(AppMismatchError):
            service.verify_token_for_app(token, THEME)

    def test_revoked_record(self, service, license, repository):
        """Test a token whose record was deleted."""
        token = service.create_token(license, 60)
        repository.records.clear()
        with pytest.raises(DownloadTokenNotFoundError):
            service.verify_token_for_app(token, PLUGIN)

    @pytest.mark.parametrize("token", ["", "%%%", base64url_encode(b"no-separator")])
    def test_malformed(self, service, token):
        """Test tokens that cannot be split."""
        with pytest.raises(MalformedTokenError):
            service.verify_token_for_app(token, PLUGIN)

    def test_tampered_payload_never_reaches_store(self, signing_key, license, frozen_clock):
        """Test a forged payload fails on signature before any lookup."""
        repository = MagicMock()
        service = DownloadTokenService(repository, signing_key, clock=frozen_clock)
        token = service.create_token(license, 60)

        payload, signature = split_token(token)
        payload["expiry_ts"] += 10**6
        forged = base64url_encode(canonical_json(payload) + b"." + signature)

        with pytest.raises(InvalidTokenSignatureError):
            service.verify_token_for_app(forged, PLUGIN)
        repository.find_by_stored_token.assert_not_called()

    def test_flipped_signature_bytes_never_reach_store(self, signing_key, license, frozen_clock):
        """Test every single-byte change to the signature is rejected before lookup."""
        repository = MagicMock()
        service = DownloadTokenService(repository, signing_key, clock=frozen_clock)
        composite = base64url_decode(service.create_token(license, 60))
        signature_start = composite.rindex(b".") + 1

        for index in range(signature_start, len(composite)):
            tampered = bytearray(composite)
            tampered[index] ^= 0x01
            with pytest.raises(AuthFailureError):
                service.verify_token_for_app(base64url_encode(bytes(tampered)), PLUGIN)

        repository.find_by_stored_token.assert_not_called()

    def test_signed_payload_with_other_binding(self, service, license, signing_key):
        """Test the signed binding must match the stored record."""
        payload, _ = split_token(service.create_token(license, 60))
        payload["app_binding"] = "theme/seo-pro"
        payload_json = canonical_json(payload)
        signature = hmac_sha256_hex(payload_json, signing_key).encode("ascii")

        with pytest.raises(InvalidTokenPayloadError):
            service.verify_token_for_app(base64url_encode(payload_json + b"." + signature), PLUGIN)

    @pytest.mark.parametrize("binding", [None, "", "plugin", "widget/seo-pro", 10])
    def test_signed_payload_with_unusable_binding(self, signing_key, frozen_clock, binding):
        """Test a binding that does not parse is rejected before lookup."""
        repository = MagicMock()
        service = DownloadTokenService(repository, signing_key, clock=frozen_clock)
        payload_json = canonical_json({"raw_token": "dl_abc", "app_binding": binding})
        signature = hmac_sha256_hex(payload_json, signing_key).encode("ascii")

        with pytest.raises(InvalidTokenPayloadError):
            service.verify_token_for_app(base64url_encode(payload_json + b"." + signature), PLUGIN)
        repository.find_by_stored_token.assert_not_called()

    def test_other_signing_key(self, repository, license, frozen_clock):
        """Test tokens do not verify under another key."""
        issuer = DownloadTokenService(repository, b"a" * 32, clock=frozen_clock)
        verifier = DownloadTokenService(repository, b"b" * 32, clock=frozen_clock)
        token = issuer.create_token(license, 60)
        with pytest.raises(InvalidTokenSignatureError):
            verifier.verify_token_for_app(token, PLUGIN)

    def test_signed_payload_without_raw_token(self, service, signing_key):
        """Test a correctly signed but unusable payload."""
        payload_json = canonical_json({"license_id": 1})
        signature = hmac_sha256_hex(payload_json, signing_key).encode("ascii")
        token = base64url_encode(payload_json + b"." + signature)
        with pytest.raises(InvalidTokenPayloadError):
            service.verify_token_for_app(token, PLUGIN)


class TestRotateAndPurge:
    """Tests for rotation, revocation and purging."""

    def test_rotate_replaces_token(self, service, license, repository):
        """Test the old token stops working after rotation."""
        old = service.create_token(license, 60)
        new = service.rotate_token(old, license, PLUGIN, expiry_seconds=600)

        assert new.token != old
        assert len(repository.records) == 1
        service.verify_token_for_app(new.token, PLUGIN)
        with pytest.raises(DownloadTokenNotFoundError):
            service.verify_token_for_app(old, PLUGIN)

    def test_rotate_rejects_token_of_another_license(self, service, license, repository):
        """Test a token is only renewed under the license it was issued for."""
        token = service.create_token(license, 60)
        other = replace(license, id=43, license_key="TST-BBBBBBBB")

        with pytest.raises(DownloadTokenNotFoundError):
            service.rotate_token(token, other, PLUGIN, expiry_seconds=600)

        (record,) = repository.records.values()
        assert record.license_key == license.license_key
        service.verify_token_for_app(token, PLUGIN)

    def test_revoke_for_license(self, service, license, repository):
        """Test revoking every token of a license."""
        service.create_token(license, 60)
        service.create_token(license, 60)
        assert service.revoke_for_license(license) == 2
        assert repository.records == {}

    def test_purge_expired(self, service, license, repository, frozen_clock):
        """Test only expired records are purged."""
        service.create_token(license, 10)
        service.create_token(license, 1000)
        frozen_clock.advance(seconds=11)

        assert service.purge_expired() == 1
        assert len(repository.records) == 1

    def test_purge_failure_reports_zero(self, signing_key):
        """Test a store failure during purge is logged, not raised."""
        repository = MagicMock()
        repository.delete_expired.side_effect = RuntimeError("store down")
        service = DownloadTokenService(repository, signing_key)
        assert service.purge_expired() == 0
