"""
Django management command for license lifecycle operations.

Subcommands:
- list: page through licenses (keys masked)
- status: set or clear a license's explicit status
- regenerate-key: give a license a new unique key
- delete: delete a license and its download tokens
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from core.domain.value_objects import LicenseStatus
from core.infrastructure.cache_adapters import cache_adapter
from core.infrastructure.crypto import derive_key_from_settings
from downloads.domain.services import DownloadTokenService
from downloads.infrastructure.repositories.django_download_token_repository import (
    DjangoDownloadTokenRepository,
)
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.regenerate_license_key import RegenerateLicenseKeyCommand
from licenses.application.commands.update_license_status import UpdateLicenseStatusCommand
from licenses.application.handlers.license_lifecycle_handlers import (
    DeleteLicenseHandler,
    RegenerateLicenseKeyHandler,
    UpdateLicenseStatusHandler,
)
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command for license lifecycle operations."""

    help = "List licenses, change status, regenerate keys or delete licenses"

    def add_arguments(self, parser):
        """Add command arguments."""
        subparsers = parser.add_subparsers(dest="action", required=True)

        list_parser = subparsers.add_parser("list", help="List licenses")
        list_parser.add_argument("--page", type=int, default=1)
        list_parser.add_argument("--limit", type=int, default=25)

        status_parser = subparsers.add_parser("status", help="Set a license status")
        status_parser.add_argument("license_id", type=int)
        status_parser.add_argument(
            "status",
            type=str,
            choices=sorted(LicenseStatus.values()) + ["derived"],
            help="New status, or 'derived' to clear it",
        )

        regenerate_parser = subparsers.add_parser("regenerate-key", help="Regenerate a key")
        regenerate_parser.add_argument("license_id", type=int)
        regenerate_parser.add_argument("--prefix", type=str, default=None)

        delete_parser = subparsers.add_parser("delete", help="Delete a license")
        delete_parser.add_argument("license_id", type=int)

    def handle(self, *args, **options):
        """Execute the command."""
        repository = CachedLicenseRepository(DjangoLicenseRepository(), cache_adapter)
        action = options["action"]
        try:
            if action == "list":
                self._list(repository, options)
            elif action == "status":
                self._set_status(repository, options)
            elif action == "regenerate-key":
                self._regenerate(repository, options)
            elif action == "delete":
                self._delete(repository, options)
        except (DomainException, ValueError) as e:
            raise CommandError(str(e)) from e

    def _list(self, repository, options):
        result = ListLicensesHandler(repository).handle(
            ListLicensesQuery(page=options["page"], limit=options["limit"])
        )
        self.stdout.write(f"Page {result.page} ({result.total} license(s) total)")
        for license in result.licenses:
            self.stdout.write(
                f"  {license.id}  {license.partial_key}  {license.app or '-'}  "
                f"{license.status}  {len(license.active_domains)}/{license.max_allowed_domains}"
            )

    def _set_status(self, repository, options):
        status = "" if options["status"] == "derived" else options["status"]
        license = UpdateLicenseStatusHandler(repository).handle(
            UpdateLicenseStatusCommand(license_id=options["license_id"], status=status)
        )
        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(f"License {license.id} status is now {license.get_status()}")
        )

    def _regenerate(self, repository, options):
        license = RegenerateLicenseKeyHandler(repository).handle(
            RegenerateLicenseKeyCommand(license_id=options["license_id"], prefix=options["prefix"])
        )
        self.stdout.write(f"License {license.id} has a new key")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(license.license_key))

    def _delete(self, repository, options):
        token_service = DownloadTokenService(
            repository=DjangoDownloadTokenRepository(),
            signing_key=derive_key_from_settings(),
        )
        tokens_deleted = DeleteLicenseHandler(repository, token_service).handle(
            DeleteLicenseCommand(license_id=options["license_id"])
        )
        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(
                f"License {options['license_id']} deleted with {tokens_deleted} download token(s)"
            )
        )
