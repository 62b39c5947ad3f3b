"""
Keyed hashing and encoding helpers.

Every HMAC in the service (download token signatures, stored token hashes,
domain secret hashes) is keyed with the output of ``derive_key``, never
with the raw master secret.
"""

import base64
import binascii
import hashlib
import hmac

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

KEY_LENGTH = 32

_URLSAFE_TO_STANDARD = bytes.maketrans(b"-_", b"+/")


def _to_bytes(value) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


def derive_key(master_secret, salt) -> bytes:
    """
    Derive the 32-byte signing key from the host secrets.

    HKDF-SHA256 with an empty info string. The result is stable for a given
    secret and salt pair, and changes whenever either is rotated.

    Args:
        master_secret: Host-supplied secret (str or bytes)
        salt: Host-supplied salt (str or bytes)

    Returns:
        32-byte derived key
    """
    return HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=_to_bytes(salt),
        info=b"",
    ).derive(_to_bytes(master_secret))


def derive_key_from_settings() -> bytes:
    """
    Derive the signing key from ``LICENSE_MASTER_SECRET`` and ``LICENSE_MASTER_SALT``.

    Raises:
        ImproperlyConfigured: If the master secret is not set
    """
    master_secret = getattr(settings, "LICENSE_MASTER_SECRET", "")
    if not master_secret:
        raise ImproperlyConfigured("LICENSE_MASTER_SECRET must be set")
    return derive_key(master_secret, getattr(settings, "LICENSE_MASTER_SALT", ""))


def hmac_sha256_hex(message, key: bytes) -> str:
    """Return the hex HMAC-SHA256 of ``message`` under ``key``."""
    return hmac.new(key, _to_bytes(message), hashlib.sha256).hexdigest()


def constant_time_equals(a, b) -> bool:
    """Compare two strings or byte strings without leaking timing."""
    return hmac.compare_digest(_to_bytes(a), _to_bytes(b))


def base64url_encode(data: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(text: str) -> bytes:
    """
    Decode URL-safe base64, with or without padding.

    Raises:
        ValueError: If the input is not valid URL-safe base64
    """
    try:
        raw = text.strip().encode("ascii")
    except (AttributeError, UnicodeEncodeError) as e:
        raise ValueError("Invalid base64url data") from e
    if b"+" in raw or b"/" in raw:
        raise ValueError("Invalid base64url data")
    raw = raw.translate(_URLSAFE_TO_STANDARD)
    raw += b"=" * (-len(raw) % 4)
    try:
        return base64.b64decode(raw, validate=True)
    except binascii.Error as e:
        raise ValueError("Invalid base64url data") from e


def base64_decode_strict(text: str) -> bytes:
    """
    Decode standard base64, rejecting any non-alphabet character.

    Raises:
        ValueError: If the input is not valid base64
    """
    try:
        return base64.b64decode(text.strip().encode("ascii"), validate=True)
    except (AttributeError, UnicodeEncodeError, binascii.Error) as e:
        raise ValueError("Invalid base64 data") from e
