"""
Download token issuance and verification.

Wire format of a client token::

    base64url(payload_json + "." + hex(HMAC-SHA256(payload_json)))

``payload_json`` is canonical JSON (sorted keys, compact separators) with
``license_id``, ``app_binding``, ``expiry_ts``, ``issued_at`` and
``raw_token``. The store only knows ``HMAC(raw_token)``, so a token can be
invalidated early by deleting its record.

Verification checks the signature before touching the store.
"""
import json
import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from core.domain.exceptions import (
    AppMismatchError,
    DomainException,
    DownloadTokenExpiredError,
    DownloadTokenNotFoundError,
    InvalidTokenPayloadError,
    InvalidTokenSignatureError,
    LicenseNotIssuedError,
    MalformedTokenError,
)
from core.domain.value_objects import AppBinding
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.crypto import (
    base64url_decode,
    base64url_encode,
    constant_time_equals,
    hmac_sha256_hex,
)
from core.metrics import (
    download_token_verifications_total,
    download_tokens_issued_total,
    download_tokens_purged_total,
)
from downloads.domain.download_token import DownloadToken
from downloads.ports.download_token_repository import DownloadTokenRepository
from hosted_apps.domain.hosted_app import HostedApp
from licenses.domain.license import License

logger = logging.getLogger(__name__)

RAW_TOKEN_PREFIX = "dl_"
DEFAULT_TTL_SECONDS = 2 * 24 * 60 * 60


@dataclass(frozen=True)
class IssuedDownloadToken:
    """A client token together with its expiry timestamp."""

    token: str
    expiry: int

    def __str__(self) -> str:
        """Return the client token."""
        return self.token


def canonical_json(payload: dict) -> bytes:
    """Serialize a payload the same way on every call."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


class DownloadTokenService:
    """
    Domain service for issuing and verifying download tokens.

    The repository, signing key and clock are supplied by the caller.
    """

    def __init__(
        self,
        repository: DownloadTokenRepository,
        signing_key: bytes,
        clock: Clock = system_clock,
    ):
        """
        Initialize the service.

        Args:
            repository: Download token repository
            signing_key: Derived HMAC key
            clock: Time source
        """
        self.repository = repository
        self.signing_key = signing_key
        self.clock = clock

    def _sign(self, message) -> str:
        return hmac_sha256_hex(message, self.signing_key)

    def issue_token(self, license: License, expiry_seconds: Optional[int] = None) -> IssuedDownloadToken:
        """
        Issue a download token for a license's application.

        Args:
            license: Issued license
            expiry_seconds: Lifetime (defaults to ``DOWNLOAD_TOKEN_TTL_SECONDS``)

        Returns:
            Client token and its expiry timestamp

        Raises:
            LicenseNotIssuedError: If the license has no application
            PersistenceError: If the record could not be stored
        """
        if not license.is_issued():
            raise LicenseNotIssuedError()
        if expiry_seconds is None:
            expiry_seconds = getattr(settings, "DOWNLOAD_TOKEN_TTL_SECONDS", DEFAULT_TTL_SECONDS)

        issued_at = self.clock.timestamp()
        expiry = issued_at + int(expiry_seconds)
        raw_token = RAW_TOKEN_PREFIX + secrets.token_hex(32)

        self.repository.save(
            DownloadToken.create(
                app_binding=license.app_binding,
                license_key=license.license_key,
                stored_token=self._sign(raw_token),
                expiry=expiry,
            )
        )

        payload_json = canonical_json(
            {
                "license_id": license.id,
                "app_binding": str(license.app_binding),
                "expiry_ts": expiry,
                "issued_at": issued_at,
                "raw_token": raw_token,
            }
        )
        signature = self._sign(payload_json).encode("ascii")
        token = base64url_encode(payload_json + b"." + signature)

        download_tokens_issued_total.labels(app_type=license.app_binding.app_type.value).inc()
        logger.info(
            "Download token issued",
            extra={
                "license_id": license.id,
                "app_binding": str(license.app_binding),
                "expiry": expiry,
            },
        )
        return IssuedDownloadToken(token=token, expiry=expiry)

    def create_token(self, license: License, expiry_seconds: Optional[int] = None) -> str:
        """
        Issue a download token and return only the client token string.

        See ``issue_token``.
        """
        return self.issue_token(license, expiry_seconds).token

    def verify_token_for_app(self, client_token: str, app: HostedApp) -> DownloadToken:
        """
        Verify a client token for an application.

        Args:
            client_token: Token as presented by the client
            app: Application the download is requested for

        Returns:
            The stored DownloadToken record

        Raises:
            MalformedTokenError: Not base64url or not ``payload.signature``
            InvalidTokenSignatureError: Signature does not verify
            InvalidTokenPayloadError: Signed payload is not usable
            DownloadTokenNotFoundError: No record for the raw token
            DownloadTokenExpiredError: Record has expired
            AppMismatchError: Token was issued for another application
        """
        try:
            record = self._verify(client_token, app)
        except DomainException as e:
            download_token_verifications_total.labels(outcome=e.code).inc()
            raise
        download_token_verifications_total.labels(outcome="valid").inc()
        return record

    def _verify(self, client_token: str, app: HostedApp) -> DownloadToken:
        if not client_token or not isinstance(client_token, str):
            raise MalformedTokenError()
        try:
            composite = base64url_decode(client_token)
        except ValueError as e:
            raise MalformedTokenError() from e

        payload_json, sep, signature = composite.rpartition(b".")
        if not sep or not payload_json or not signature:
            raise MalformedTokenError()

        expected = self._sign(payload_json).encode("ascii")
        if not constant_time_equals(expected, signature):
            raise InvalidTokenSignatureError()

        try:
            payload = json.loads(payload_json.decode("utf-8"))
        except ValueError as e:
            raise InvalidTokenPayloadError() from e
        if not isinstance(payload, dict):
            raise InvalidTokenPayloadError()
        raw_token = payload.get("raw_token")
        if not isinstance(raw_token, str) or not raw_token:
            raise InvalidTokenPayloadError()
        try:
            binding = AppBinding.parse(payload.get("app_binding"))
        except ValueError as e:
            raise InvalidTokenPayloadError() from e

        record = self.repository.find_by_stored_token(self._sign(raw_token))
        if record is None:
            raise DownloadTokenNotFoundError()
        if record.app_binding != binding:
            raise InvalidTokenPayloadError()

        if record.is_expired(self.clock.timestamp()):
            raise DownloadTokenExpiredError()

        if record.app_binding != app.binding:
            raise AppMismatchError("Download token is not valid for this application")

        return record

    def rotate_token(
        self,
        client_token: str,
        license: License,
        app: HostedApp,
        expiry_seconds: Optional[int] = None,
    ) -> IssuedDownloadToken:
        """
        Replace a valid token with a fresh one.

        The presented token is verified, its record deleted, and a new token
        issued for the license. A token issued under another license is
        treated as unknown and left untouched.

        Returns:
            The new client token and its expiry

        Raises:
            DownloadTokenNotFoundError: If the token belongs to another license
        """
        record = self.verify_token_for_app(client_token, app)
        if record.license_key != license.license_key:
            logger.warning(
                "Download token presented under another license",
                extra={"license_id": license.id, "app_binding": str(app.binding)},
            )
            raise DownloadTokenNotFoundError("Download token was not issued for this license")
        self.repository.delete(record.id)
        return self.issue_token(license, expiry_seconds)

    def revoke_for_license(self, license: License) -> int:
        """
        Delete every token issued for a license.

        Returns:
            Number of tokens deleted
        """
        return self.repository.delete_by_license_key(license.license_key)

    def purge_expired(self) -> int:
        """
        Delete every expired token record.

        Failures are logged and reported as zero rows removed.

        Returns:
            Number of records deleted
        """
        try:
            deleted = self.repository.delete_expired(self.clock.timestamp())
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to purge expired download tokens: %s", e, exc_info=True)
            return 0

        download_tokens_purged_total.inc(deleted)
        logger.info("Purged expired download tokens", extra={"deleted": deleted})
        return deleted
