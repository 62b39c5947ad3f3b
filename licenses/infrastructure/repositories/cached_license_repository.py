"""
Read-through cache in front of a LicenseRepository.

Lookups by id and by (service, key) are cached for ``LICENSE_CACHE_TTL``
seconds. Every write path drops the affected entries before returning, and
again when the surrounding transaction commits.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import transaction

from core.infrastructure.cache import CachePort, make_cache_key
from core.metrics import license_cache_hits_total, license_cache_misses_total
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "license"
DEFAULT_TTL = 30 * 60


class CachedLicenseRepository(LicenseRepository):
    """
    Caching decorator for a LicenseRepository.

    Only successful lookups are cached; a miss always reaches the store.
    """

    def __init__(self, repository: LicenseRepository, cache: CachePort, ttl: Optional[int] = None):
        """
        Initialize the cached repository.

        Args:
            repository: Repository that talks to the store
            cache: Cache port
            ttl: Entry lifetime in seconds (defaults to ``LICENSE_CACHE_TTL``)
        """
        self.repository = repository
        self.cache = cache
        self.ttl = ttl if ttl is not None else getattr(settings, "LICENSE_CACHE_TTL", DEFAULT_TTL)

    @staticmethod
    def _id_key(license_id: int) -> str:
        return make_cache_key(CACHE_NAMESPACE, "find_by_id", license_id)

    @staticmethod
    def _lookup_key(service_id: str, license_key: str) -> str:
        return make_cache_key(CACHE_NAMESPACE, "find_by_service_and_key", service_id, license_key)

    def _keys_for(self, licenses: Iterable[Optional[License]]) -> List[str]:
        keys = []
        for license in licenses:
            if license is None:
                continue
            if license.id is not None:
                keys.append(self._id_key(license.id))
            keys.append(self._lookup_key(license.service_id, license.license_key))
        return keys

    def _invalidate(self, keys: List[str]) -> None:
        if not keys:
            return
        self.cache.delete_many(keys)
        transaction.on_commit(lambda: self.cache.delete_many(keys))

    def _read_through(self, key: str, method: str, loader) -> Optional[License]:
        cached = self.cache.get(key)
        if cached is not None:
            license_cache_hits_total.labels(method=method).inc()
            return cached

        license_cache_misses_total.labels(method=method).inc()
        license = loader()
        if license is not None:
            self.cache.set(key, license, timeout=self.ttl)
        return license

    def save(self, license: License) -> License:
        """Save through to the store and drop the license's cache entries."""
        previous = self.repository.reload(license.id) if license.id is not None else None
        try:
            saved = self.repository.save(license)
        finally:
            self._invalidate(self._keys_for([previous, license]))
        return saved

    def find_by_id(self, license_id: int) -> Optional[License]:
        """Find a license by ID, serving from cache when possible."""
        return self._read_through(
            self._id_key(license_id),
            "find_by_id",
            lambda: self.repository.find_by_id(license_id),
        )

    def find_by_service_and_key(self, service_id: str, license_key: str) -> Optional[License]:
        """Find a license by service and key, serving from cache when possible."""
        return self._read_through(
            self._lookup_key(service_id, license_key),
            "find_by_service_and_key",
            lambda: self.repository.find_by_service_and_key(service_id, license_key),
        )

    def reload(self, license_id: int) -> Optional[License]:
        """Read a license straight from the store."""
        return self.repository.reload(license_id)

    def license_key_exists(self, license_key: str) -> bool:
        """Check key usage against the store."""
        return self.repository.license_key_exists(license_key)

    def update_license_key(self, license_id: int, license_key: str) -> bool:
        """Replace a key and drop cache entries under both the old and new key."""
        previous = self.repository.reload(license_id)
        try:
            updated = self.repository.update_license_key(license_id, license_key)
        finally:
            keys = self._keys_for([previous])
            if previous is not None:
                keys.append(self._lookup_key(previous.service_id, license_key))
            self._invalidate(keys)
        return updated

    def delete(self, license_id: int) -> bool:
        """Delete a license and drop its cache entries."""
        previous = self.repository.reload(license_id)
        try:
            deleted = self.repository.delete(license_id)
        finally:
            keys = self._keys_for([previous]) or [self._id_key(license_id)]
            self._invalidate(keys)
        return deleted

    def list(self, page: int = 1, limit: int = 25) -> Tuple[List[License], int]:
        """List licenses from the store."""
        return self.repository.list(page=page, limit=limit)
