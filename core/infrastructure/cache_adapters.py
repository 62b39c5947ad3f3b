"""
Django cache framework implementation of CachePort.
"""

import logging
from typing import Any, Iterable, Optional

from django.core.cache import caches

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)


class DjangoCacheAdapter(CachePort):
    """
    CachePort backed by one of the ``CACHES`` aliases.

    Reads and fills degrade to a miss when the backend is unavailable.
    Deletes propagate backend errors: an invalidation that silently failed
    would let a stale license be served after a write.
    """

    def __init__(self, alias: str = "default"):
        """
        Initialize the adapter.

        Args:
            alias: Name of the Django cache to use
        """
        self.alias = alias

    @property
    def backend(self):
        return caches[self.alias]

    def get(self, key: str) -> Optional[Any]:
        try:
            return self.backend.get(key)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning("Cache read failed for %s", key, exc_info=True)
            return None

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        try:
            self.backend.set(key, value, timeout=timeout)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning("Cache write failed for %s", key, exc_info=True)

    def delete(self, key: str) -> None:
        self.backend.delete(key)

    def delete_many(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if keys:
            self.backend.delete_many(keys)
            logger.debug("Invalidated %d cache key(s)", len(keys))

    def clear(self) -> None:
        self.backend.clear()


cache_adapter = DjangoCacheAdapter()
