"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from core.domain.exceptions import (
    ConcurrentModificationError,
    LicenseNotFoundError,
    PersistenceError,
)
from core.domain.value_objects import AppBinding, AppType
from licenses.domain.license import License
from licenses.infrastructure import activation_map_codec
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to column values
    3. Implements the conditional (version-checked) update
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        app_binding = None
        if model.app_type and model.app_slug:
            app_binding = AppBinding(app_type=AppType(model.app_type), app_slug=model.app_slug)

        return License(
            id=model.id,
            license_key=model.license_key,
            service_id=model.service_id,
            owner_id=model.owner_id,
            licensee_fullname=model.licensee_fullname,
            app_binding=app_binding,
            app_id=model.app_id if app_binding else None,
            status=model.status,
            start_date=model.start_date,
            end_date=model.end_date,
            max_allowed_domains=model.max_allowed_domains,
            activated_domains=activation_map_codec.decode(model.activation_map),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_fields(self, license: License) -> dict:
        """
        Convert domain entity to column values.

        Args:
            license: License domain entity

        Returns:
            Mapping of column name to value (identity and version excluded)
        """
        binding = license.app_binding
        return {
            "license_key": license.license_key,
            "service_id": license.service_id,
            "owner_id": license.owner_id,
            "licensee_fullname": license.licensee_fullname,
            "app_type": binding.app_type.value if binding else "",
            "app_slug": binding.app_slug if binding else "",
            "app_id": license.app_id,
            "status": license.status,
            "start_date": license.start_date,
            "end_date": license.end_date,
            "max_allowed_domains": license.max_allowed_domains,
            "activation_map": activation_map_codec.encode(license.activated_domains),
        }

    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity with its new version

        Raises:
            ConcurrentModificationError: If the stored version has moved on
            LicenseNotFoundError: If updating a license that no longer exists
            PersistenceError: If the store rejects the write
        """
        if license.id is None:
            return self._insert(license)
        return self._update(license)

    def _insert(self, license: License) -> License:
        try:
            with transaction.atomic():
                model = LicenseModel.objects.create(version=1, **self._to_fields(license))
        except DatabaseError as e:
            logger.error("Failed to insert license: %s", e, exc_info=True)
            raise PersistenceError("Unable to save license") from e
        return self._to_domain(model)

    def _update(self, license: License) -> License:
        now = timezone.now()
        try:
            with transaction.atomic():
                updated = LicenseModel.objects.filter(
                    id=license.id, version=license.version
                ).update(version=F("version") + 1, updated_at=now, **self._to_fields(license))
        except DatabaseError as e:
            logger.error("Failed to update license %s: %s", license.id, e, exc_info=True)
            raise PersistenceError("Unable to save license") from e

        if updated == 0:
            if not LicenseModel.objects.filter(id=license.id).exists():
                raise LicenseNotFoundError()
            logger.info(
                "Stale license version rejected",
                extra={"license_id": license.id, "version": license.version},
            )
            raise ConcurrentModificationError()

        return replace(license, version=license.version + 1, updated_at=now)

    def find_by_id(self, license_id: int) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    def find_by_service_and_key(self, service_id: str, license_key: str) -> Optional[License]:
        """
        Find a license by its service and key.

        Args:
            service_id: Service the license belongs to
            license_key: License key

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(service_id=service_id, license_key=license_key)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:
            return None

    def reload(self, license_id: int) -> Optional[License]:
        """
        Read a license straight from the store.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        return self.find_by_id(license_id)

    def license_key_exists(self, license_key: str) -> bool:
        """
        Check if a license key is already in use.

        Args:
            license_key: License key

        Returns:
            True if some license carries the key
        """
        return LicenseModel.objects.filter(license_key=license_key).exists()

    def update_license_key(self, license_id: int, license_key: str) -> bool:
        """
        Replace the key of a stored license.

        Args:
            license_id: License id
            license_key: New license key

        Returns:
            True if a row was updated

        Raises:
            PersistenceError: If the store rejects the write
        """
        try:
            with transaction.atomic():
                updated = LicenseModel.objects.filter(id=license_id).update(
                    license_key=license_key,
                    version=F("version") + 1,
                    updated_at=timezone.now(),
                )
        except DatabaseError as e:
            logger.error("Failed to update key of license %s: %s", license_id, e, exc_info=True)
            raise PersistenceError("Unable to save the regenerated license key") from e
        return updated > 0

    def delete(self, license_id: int) -> bool:
        """
        Delete a license.

        Args:
            license_id: License id

        Returns:
            True if a row was deleted
        """
        deleted, _ = LicenseModel.objects.filter(id=license_id).delete()
        return deleted > 0

    def list(self, page: int = 1, limit: int = 25) -> Tuple[List[License], int]:
        """
        List licenses, newest first.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (licenses on the page, total count)
        """
        page = max(page, 1)
        limit = max(limit, 1)
        queryset = LicenseModel.objects.all()
        total = queryset.count()
        offset = (page - 1) * limit
        models = queryset[offset:offset + limit]
        return [self._to_domain(model) for model in models], total
