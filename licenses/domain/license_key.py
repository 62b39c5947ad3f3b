"""
License key generation.

Keys have the display form ``PREFIX-XXXXXXXX-XXXXXXXX-...``: an uppercase
alphanumeric prefix followed by 8-character uppercase alphanumeric groups.
"""

import re
import secrets
import uuid

from django.conf import settings

DEFAULT_PREFIX = "LIC"
GROUP_SIZE = 8

LICENSE_KEY_PATTERN = re.compile(r"^[A-Z0-9]+(-[A-Z0-9]{8})*$")

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def sanitize_prefix(prefix: str = None) -> str:
    """
    Reduce a prefix to uppercase alphanumerics.

    Falls back to ``LICENSE_KEY_PREFIX`` and then to ``LIC`` when the
    result would be empty.
    """
    if prefix is None:
        prefix = getattr(settings, "LICENSE_KEY_PREFIX", DEFAULT_PREFIX)
    cleaned = _NON_ALNUM.sub("", prefix or "").upper()
    return cleaned or DEFAULT_PREFIX


def generate_license_key(prefix: str = None) -> str:
    """
    Generate a license key in format: PREFIX-XXXXXXXX-XXXXXXXX-....

    The body is 64 hex characters: a random UUID followed by 16 random bytes.

    Args:
        prefix: Key prefix (defaults to the ``LICENSE_KEY_PREFIX`` setting)

    Returns:
        Generated license key string
    """
    body = (uuid.uuid4().hex + secrets.token_hex(16)).upper()
    body = _NON_ALNUM.sub("", body)
    groups = [body[i:i + GROUP_SIZE] for i in range(0, len(body), GROUP_SIZE)]
    return "-".join([sanitize_prefix(prefix)] + groups)
