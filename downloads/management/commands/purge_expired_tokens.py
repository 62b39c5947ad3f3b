"""
Django management command to delete expired download tokens.

The same sweep runs hourly from Celery beat; this command runs it on demand.
"""

import logging

from django.core.management.base import BaseCommand

from core.infrastructure.crypto import derive_key_from_settings
from downloads.domain.services import DownloadTokenService
from downloads.infrastructure.models import DownloadToken as DownloadTokenModel
from downloads.infrastructure.repositories.django_download_token_repository import (
    DjangoDownloadTokenRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to delete expired download tokens."""

    help = "Delete expired download tokens"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - only count expired tokens",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        service = DownloadTokenService(
            repository=DjangoDownloadTokenRepository(),
            signing_key=derive_key_from_settings(),
        )

        if options["dry_run"]:
            now_ts = service.clock.timestamp()
            # pylint: disable=no-member
            count = DownloadTokenModel.objects.filter(expiry__gt=0, expiry__lt=now_ts).count()
            self.stdout.write(f"Found {count} expired download token(s)")
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            return

        deleted = service.purge_expired()
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} expired download token(s)"))
