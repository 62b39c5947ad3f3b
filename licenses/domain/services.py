"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
from typing import Optional, Tuple

from django.conf import settings

from core.domain.exceptions import (
    LicenseKeyGenerationError,
    LicenseNotPersistedError,
    PersistenceError,
)
from core.domain.value_objects import SiteURL
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_KEY_GENERATION_TRIES = 10


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    @staticmethod
    def generate(prefix: Optional[str] = None) -> str:
        """
        Generate a license key.

        Args:
            prefix: Key prefix (defaults to the configured prefix)

        Returns:
            Generated license key string
        """
        return generate_license_key(prefix)

    @staticmethod
    def generate_unique(
        repository: LicenseRepository,
        prefix: Optional[str] = None,
        tries: Optional[int] = None,
    ) -> str:
        """
        Generate a key that no stored license carries.

        Args:
            repository: License repository
            prefix: Key prefix
            tries: Maximum attempts (defaults to ``LICENSE_KEY_GENERATION_TRIES``)

        Returns:
            Unused license key

        Raises:
            LicenseKeyGenerationError: If every attempt collided
        """
        if tries is None:
            tries = getattr(settings, "LICENSE_KEY_GENERATION_TRIES", DEFAULT_KEY_GENERATION_TRIES)

        for attempt in range(1, max(tries, 1) + 1):
            candidate = generate_license_key(prefix)
            if not repository.license_key_exists(candidate):
                return candidate
            logger.warning("License key collision on attempt %d", attempt)

        raise LicenseKeyGenerationError()

    @classmethod
    def regenerate(
        cls,
        license: License,
        repository: LicenseRepository,
        prefix: Optional[str] = None,
        persist: bool = True,
        tries: Optional[int] = None,
    ) -> License:
        """
        Give a license a new unique key.

        Args:
            license: License entity
            repository: License repository
            prefix: Key prefix
            persist: Write the new key to the store
            tries: Maximum generation attempts

        Returns:
            License carrying the new key

        Raises:
            LicenseNotPersistedError: If persisting a license without an id
            LicenseKeyGenerationError: If no unique key was found
            PersistenceError: If the store rejects the write
        """
        if persist and license.id is None:
            raise LicenseNotPersistedError()

        new_key = cls.generate_unique(repository, prefix=prefix, tries=tries)
        regenerated = license.with_license_key(new_key)

        if persist:
            if not repository.update_license_key(license.id, new_key):
                raise PersistenceError("Unable to save the regenerated license key")
            logger.info(
                "License key regenerated",
                extra={"license_id": license.id, "license_key": regenerated.partial_key()},
            )
        return regenerated


class LicenseDomainManager:
    """Domain service for the per-license activation map."""

    @staticmethod
    def update_active_domains(
        license: License,
        url: str,
        secret_hash: str,
        repository: LicenseRepository,
    ) -> License:
        """
        Record a site on a license and persist it.

        Args:
            license: License entity
            url: Site URL or host
            secret_hash: Keyed hash of the site's secret
            repository: License repository

        Returns:
            Saved license entity
        """
        return repository.save(license.with_active_domain(url, secret_hash))

    @staticmethod
    def remove_activated_domain(
        license: License,
        url: str,
        repository: LicenseRepository,
    ) -> Tuple[License, bool]:
        """
        Remove a site from a license and persist it.

        Nothing is written when the site is not on the license.

        Args:
            license: License entity
            url: Site URL or host
            repository: License repository

        Returns:
            Tuple of (license, whether a domain was removed)
        """
        if license.is_new_domain(url):
            return license, False
        saved = repository.save(license.without_active_domain(url))
        logger.info(
            "Domain removed from license",
            extra={"license_id": license.id, "domain": SiteURL.parse(url).host},
        )
        return saved, True


class LicenseLifecycleManager:
    """Domain service for managing license lifecycle."""

    @staticmethod
    def set_status(
        license: License,
        status: str,
        repository: LicenseRepository,
    ) -> License:
        """
        Set an explicit status (or clear it with an empty string).

        Args:
            license: License entity
            status: New status
            repository: License repository

        Returns:
            Saved license entity
        """
        return repository.save(license.with_status(status))

    @staticmethod
    def deactivate(license: License, repository: LicenseRepository) -> License:
        """
        Deactivate a license.

        Args:
            license: License entity
            repository: License repository

        Returns:
            Saved license entity

        Raises:
            LicenseAlreadyDeactivatedError: If already deactivated
        """
        return repository.save(license.deactivate())
