"""
Per-domain secret handshake.

When a host activates a license for the first time it receives a random
32-byte secret, base64-encoded, exactly once. The license keeps only
``HMAC(secret)`` under the host. Later requests from that host present the
secret as a bearer credential and are authenticated by recomputing the HMAC.
"""
import base64
import logging
import secrets
from typing import Optional, Tuple

from core.domain.exceptions import (
    AuthorizationFailedError,
    AuthorizationHeaderNotFoundError,
    DomainException,
    DomainLimitReachedError,
    InvalidTokenFormatError,
    SiteTokenMissingError,
)
from core.domain.value_objects import SiteURL
from core.infrastructure.crypto import base64_decode_strict, constant_time_equals, hmac_sha256_hex
from core.metrics import domain_secret_verifications_total
from licenses.domain.license import ActivatedDomain, License
from licenses.domain.services import LicenseDomainManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

SECRET_BYTES = 32


class DomainSecretService:
    """Issues and verifies per-domain site secrets."""

    def __init__(self, signing_key: bytes, license_repository: LicenseRepository):
        """
        Initialize the service.

        Args:
            signing_key: Derived HMAC key
            license_repository: Repository used to persist new activations
        """
        self.signing_key = signing_key
        self.license_repository = license_repository

    def hash_secret(self, raw_secret: bytes) -> str:
        """Return the keyed hash stored for a raw secret."""
        return hmac_sha256_hex(raw_secret, self.signing_key)

    def provision(self, license: License, url: str) -> Tuple[License, str]:
        """
        Activate a previously unseen site and hand out its secret.

        Args:
            license: License to activate on
            url: Site URL or host

        Returns:
            Tuple of (saved license, base64 site secret). The secret is not
            stored anywhere and cannot be recovered later.

        Raises:
            DomainLimitReachedError: If the license has no free domain slot
            ConcurrentModificationError: If the license changed since it was read
        """
        if license.has_reached_max_allowed_domains():
            raise DomainLimitReachedError()

        raw_secret = secrets.token_bytes(SECRET_BYTES)
        saved = LicenseDomainManager.update_active_domains(
            license, url, self.hash_secret(raw_secret), self.license_repository
        )
        logger.info(
            "Domain activated",
            extra={"license_id": license.id, "domain": SiteURL.parse(url).host},
        )
        return saved, base64.b64encode(raw_secret).decode("ascii")

    def verify(self, license: License, url: str, credential: Optional[str]) -> ActivatedDomain:
        """
        Authenticate a site against its stored secret hash.

        Args:
            license: License the site claims to be activated on
            url: Site URL or host
            credential: Base64 secret presented by the site

        Returns:
            The site's activation record

        Raises:
            SiteTokenMissingError: Site has no activation on the license
            AuthorizationHeaderNotFoundError: No credential was presented
            InvalidTokenFormatError: Credential is not valid base64
            AuthorizationFailedError: Credential does not match
        """
        try:
            record = self._verify(license, url, credential)
        except DomainException as e:
            domain_secret_verifications_total.labels(outcome=e.code).inc()
            logger.warning(
                "Site credential rejected",
                extra={"license_id": license.id, "reason": e.code},
            )
            raise
        domain_secret_verifications_total.labels(outcome="valid").inc()
        return record

    def _verify(self, license: License, url: str, credential: Optional[str]) -> ActivatedDomain:
        record = license.get_active_domain(url)
        if record is None:
            raise SiteTokenMissingError()

        if not credential:
            raise AuthorizationHeaderNotFoundError()

        try:
            raw_secret = base64_decode_strict(credential)
        except ValueError as e:
            raise InvalidTokenFormatError() from e
        if not raw_secret:
            raise InvalidTokenFormatError()

        if not constant_time_equals(self.hash_secret(raw_secret), record.secret_hash):
            raise AuthorizationFailedError()

        return record
