"""
Celery tasks for download token housekeeping.
"""
import logging

from EntitlementService.celery import app

from core.infrastructure.crypto import derive_key_from_settings
from downloads.domain.services import DownloadTokenService
from downloads.infrastructure.repositories.django_download_token_repository import (
    DjangoDownloadTokenRepository,
)

logger = logging.getLogger(__name__)


@app.task
def purge_expired_download_tokens() -> int:
    """
    Delete expired download token records.

    Returns:
        Number of records deleted
    """
    service = DownloadTokenService(
        repository=DjangoDownloadTokenRepository(),
        signing_key=derive_key_from_settings(),
    )
    deleted = service.purge_expired()
    logger.info("Scheduled download token purge finished", extra={"deleted": deleted})
    return deleted
