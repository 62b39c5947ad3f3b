"""
Cache port.

The license repository caches reads through this interface; the only
implementation is the Django cache adapter.
"""
import hashlib
import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional


def make_cache_key(namespace: str, method: str, *args: Any) -> str:
    """
    Build a deterministic cache key for a method call.

    Args:
        namespace: Key prefix (e.g. ``license``)
        method: Name of the cached operation
        *args: Call arguments; must be JSON-serializable or have a stable str()

    Returns:
        ``<namespace>:<sha256 hex>`` key
    """
    fingerprint = json.dumps([method, list(args)], sort_keys=True, default=str)
    digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


class CachePort(ABC):
    """Key/value cache with per-entry timeouts."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss."""

    @abstractmethod
    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key
            value: Picklable value
            timeout: Seconds to keep the entry (None keeps it until evicted)
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove one entry."""

    @abstractmethod
    def delete_many(self, keys: Iterable[str]) -> None:
        """Remove several entries."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""
