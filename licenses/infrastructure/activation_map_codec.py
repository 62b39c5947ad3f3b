"""
Storage encoding of a license's activated domains.

Stored shape (version 1)::

    {"version": 1, "domains": {"<host>": {"origin": "...", "secret_hash": "..."}}}

Unknown versions and malformed entries are rejected on load.
"""
from typing import Any, Dict, Mapping

from licenses.domain.license import ActivatedDomain

CURRENT_VERSION = 1


class ActivationMapDecodeError(ValueError):
    """Raised when a stored activation map cannot be decoded."""


def empty_activation_map() -> Dict[str, Any]:
    """Return the stored form of an empty activation map."""
    return {"version": CURRENT_VERSION, "domains": {}}


def encode(domains: Mapping[str, ActivatedDomain]) -> Dict[str, Any]:
    """
    Encode activated domains for storage.

    Args:
        domains: Mapping of host to activation record

    Returns:
        JSON-serializable document
    """
    return {
        "version": CURRENT_VERSION,
        "domains": {
            host: {"origin": record.origin, "secret_hash": record.secret_hash}
            for host, record in sorted(domains.items())
        },
    }


def decode(document: Any) -> Dict[str, ActivatedDomain]:
    """
    Decode a stored activation map.

    Args:
        document: Stored document (None is treated as empty)

    Returns:
        Mapping of host to activation record

    Raises:
        ActivationMapDecodeError: If the document is not a supported version
            or an entry is malformed
    """
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ActivationMapDecodeError("Activation map must be an object")

    version = document.get("version")
    if version != CURRENT_VERSION:
        raise ActivationMapDecodeError(f"Unsupported activation map version: {version!r}")

    domains = document.get("domains", {})
    if not isinstance(domains, dict):
        raise ActivationMapDecodeError("Activation map domains must be an object")

    decoded = {}
    for host, entry in domains.items():
        if not isinstance(host, str) or not host or host != host.lower():
            raise ActivationMapDecodeError(f"Invalid activated host: {host!r}")
        if not isinstance(entry, dict):
            raise ActivationMapDecodeError(f"Invalid activation record for {host}")
        origin = entry.get("origin")
        secret_hash = entry.get("secret_hash")
        if not isinstance(origin, str) or not isinstance(secret_hash, str):
            raise ActivationMapDecodeError(f"Invalid activation record for {host}")
        try:
            decoded[host] = ActivatedDomain(origin=origin, secret_hash=secret_hash)
        except ValueError as e:
            raise ActivationMapDecodeError(f"Invalid activation record for {host}") from e
    return decoded
