"""
Django management command to issue a license to a hosted application.

Prints the full license key once; it is never shown again.
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_datetime

from core.domain.exceptions import DomainException
from core.domain.value_objects import AppType
from core.infrastructure.cache_adapters import cache_adapter
from hosted_apps.infrastructure.repositories.django_hosted_app_repository import (
    DjangoHostedAppRepository,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

logger = logging.getLogger(__name__)


def _parse_date(value, option):
    if value is None:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise CommandError(f"{option} must be an ISO 8601 datetime, got {value!r}")
    return parsed


class Command(BaseCommand):
    """Command to issue a license."""

    help = "Create a license and issue it to a plugin, theme or software"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("service_id", type=str, help="Service the license belongs to")
        parser.add_argument(
            "app_type",
            type=str,
            choices=[app_type.value for app_type in AppType],
            help="Application variant",
        )
        parser.add_argument("app_slug", type=str, help="Application slug")
        parser.add_argument(
            "--max-domains",
            type=int,
            default=-1,
            help="Maximum activated domains (-1 for unlimited, default: -1)",
        )
        parser.add_argument("--start", type=str, default=None, help="Start date (ISO 8601)")
        parser.add_argument("--end", type=str, default=None, help="End date (ISO 8601)")
        parser.add_argument("--owner-id", type=int, default=0, help="Owning principal id")
        parser.add_argument("--licensee", type=str, default="", help="Licensee full name")
        parser.add_argument("--prefix", type=str, default=None, help="License key prefix")

    def handle(self, *args, **options):
        """Execute the command."""
        handler = IssueLicenseHandler(
            hosted_app_repository=DjangoHostedAppRepository(),
            license_repository=CachedLicenseRepository(DjangoLicenseRepository(), cache_adapter),
        )
        command = IssueLicenseCommand(
            service_id=options["service_id"],
            app_type=AppType(options["app_type"]),
            app_slug=options["app_slug"],
            max_allowed_domains=options["max_domains"],
            start_date=_parse_date(options["start"], "--start"),
            end_date=_parse_date(options["end"], "--end"),
            owner_id=options["owner_id"],
            licensee_fullname=options["licensee"],
            key_prefix=options["prefix"],
        )
        try:
            result = handler.handle(command)
        except (DomainException, ValueError) as e:
            raise CommandError(str(e)) from e

        self.stdout.write(f"License {result.license.id} issued to {result.license.app}")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(result.license_key))
