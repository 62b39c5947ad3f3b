"""
Django implementation of DownloadTokenRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import logging
from typing import Optional

from django.db import DatabaseError, transaction

from core.domain.exceptions import PersistenceError
from core.domain.value_objects import AppBinding, AppType
from downloads.domain.download_token import DownloadToken
from downloads.infrastructure.models import DownloadToken as DownloadTokenModel
from downloads.ports.download_token_repository import DownloadTokenRepository

logger = logging.getLogger(__name__)


class DjangoDownloadTokenRepository(DownloadTokenRepository):
    """Django ORM implementation of DownloadTokenRepository."""

    def _to_domain(self, model: DownloadTokenModel) -> DownloadToken:
        """
        Convert Django model to domain entity.

        Args:
            model: Django DownloadToken model

        Returns:
            DownloadToken domain entity
        """
        return DownloadToken(
            id=model.id,
            app_binding=AppBinding(app_type=AppType(model.app_type), app_slug=model.app_slug),
            license_key=model.license_key,
            stored_token=model.stored_token,
            expiry=model.expiry,
        )

    def save(self, token: DownloadToken) -> DownloadToken:
        """
        Insert a download token record.

        Args:
            token: Unsaved DownloadToken entity

        Returns:
            Saved entity (with id assigned)

        Raises:
            PersistenceError: If the store rejects the write
        """
        try:
            with transaction.atomic():
                model = DownloadTokenModel.objects.create(
                    app_type=token.app_binding.app_type.value,
                    app_slug=token.app_binding.app_slug,
                    license_key=token.license_key,
                    stored_token=token.stored_token,
                    expiry=token.expiry,
                )
        except DatabaseError as e:
            logger.error("Failed to save download token: %s", e, exc_info=True)
            raise PersistenceError("Unable to save download token") from e
        return self._to_domain(model)

    def find_by_stored_token(self, stored_token: str) -> Optional[DownloadToken]:
        """
        Find a record by the keyed hash of its raw token.

        Args:
            stored_token: Keyed hash of the raw token

        Returns:
            DownloadToken entity or None if not found
        """
        try:
            return self._to_domain(DownloadTokenModel.objects.get(stored_token=stored_token))
        except DownloadTokenModel.DoesNotExist:
            return None

    def delete(self, token_id: int) -> bool:
        """
        Delete a record.

        Args:
            token_id: Record id

        Returns:
            True if a row was deleted
        """
        deleted, _ = DownloadTokenModel.objects.filter(id=token_id).delete()
        return deleted > 0

    def delete_by_license_key(self, license_key: str) -> int:
        """
        Delete every record issued for a license.

        Args:
            license_key: License key

        Returns:
            Number of rows deleted
        """
        deleted, _ = DownloadTokenModel.objects.filter(license_key=license_key).delete()
        return deleted

    def delete_expired(self, now_ts: int) -> int:
        """
        Delete records whose expiry has passed.

        Args:
            now_ts: Current unix timestamp

        Returns:
            Number of rows deleted
        """
        deleted, _ = DownloadTokenModel.objects.filter(expiry__gt=0, expiry__lt=now_ts).delete()
        return deleted
