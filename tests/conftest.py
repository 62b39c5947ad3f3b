"""
Pytest configuration and shared fixtures.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.core.cache import cache
from django.utils import timezone

from core.domain.exceptions import ConcurrentModificationError, LicenseNotFoundError
from core.domain.value_objects import AppType
from core.infrastructure.cache_adapters import DjangoCacheAdapter
from core.infrastructure.clock import Clock
from core.infrastructure.crypto import derive_key
from downloads.domain.services import DownloadTokenService
from downloads.infrastructure.repositories.django_download_token_repository import (
    DjangoDownloadTokenRepository,
)
from hosted_apps.domain.hosted_app import Plugin, Theme
from hosted_apps.infrastructure.repositories.django_hosted_app_repository import (
    DjangoHostedAppRepository,
)
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.repositories.cached_license_repository import (
    CachedLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from activations.domain.domain_secret import DomainSecretService

TEST_MASTER_SECRET = "test-master-secret"
TEST_MASTER_SALT = "test-salt"


class FrozenClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class InMemoryLicenseRepository:
    """
    LicenseRepository fake with the same version check as the ORM one.

    Not a subclass of the port so tests can count calls freely.
    """

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.saves = 0

    def save(self, license: License) -> License:
        self.saves += 1
        if license.id is None:
            saved = replace(license, id=self.next_id, version=1)
            self.next_id += 1
            self.rows[saved.id] = saved
            return saved
        stored = self.rows.get(license.id)
        if stored is None:
            raise LicenseNotFoundError()
        if stored.version != license.version:
            raise ConcurrentModificationError()
        saved = replace(license, version=license.version + 1)
        self.rows[saved.id] = saved
        return saved

    def find_by_id(self, license_id):
        return self.rows.get(license_id)

    def find_by_service_and_key(self, service_id, license_key):
        for license in self.rows.values():
            if license.service_id == service_id and license.license_key == license_key:
                return license
        return None

    def reload(self, license_id):
        return self.rows.get(license_id)

    def license_key_exists(self, license_key):
        return any(license.license_key == license_key for license in self.rows.values())

    def update_license_key(self, license_id, license_key):
        stored = self.rows.get(license_id)
        if stored is None:
            return False
        self.rows[license_id] = replace(
            stored, license_key=license_key, version=stored.version + 1
        )
        return True

    def delete(self, license_id):
        return self.rows.pop(license_id, None) is not None

    def list(self, page=1, limit=25):
        ordered = sorted(self.rows.values(), key=lambda license: -license.id)
        start = (page - 1) * limit
        return ordered[start:start + limit], len(ordered)


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def frozen_clock():
    """Fixture for a clock fixed at 2030-01-01 00:00 UTC."""
    return FrozenClock(datetime(2030, 1, 1, tzinfo=dt_timezone.utc))


@pytest.fixture
def signing_key():
    """Fixture for the signing key derived from the test settings."""
    return derive_key(TEST_MASTER_SECRET, TEST_MASTER_SALT)


@pytest.fixture
def memory_license_repository():
    """Fixture for an in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def hosted_app_repository():
    """Fixture for HostedAppRepository."""
    return DjangoHostedAppRepository()


@pytest.fixture
def license_repository():
    """Fixture for the ORM LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def cached_license_repository(license_repository):
    """Fixture for the cached LicenseRepository."""
    return CachedLicenseRepository(license_repository, DjangoCacheAdapter())


@pytest.fixture
def download_token_repository():
    """Fixture for DownloadTokenRepository."""
    return DjangoDownloadTokenRepository()


@pytest.fixture
def download_token_service(download_token_repository, signing_key):
    """Fixture for a DownloadTokenService backed by the database."""
    return DownloadTokenService(download_token_repository, signing_key)


@pytest.fixture
def domain_secret_service(cached_license_repository, signing_key):
    """Fixture for a DomainSecretService backed by the database."""
    return DomainSecretService(signing_key, cached_license_repository)


@pytest.fixture
def sample_license():
    """Fixture for an unsaved, unissued License entity."""
    return License.create(
        service_id="svc-1",
        license_key=generate_license_key("TST"),
        max_allowed_domains=2,
        end_date=timezone.now() + timedelta(days=365),
    )


@pytest.fixture
def db_plugin(db, hosted_app_repository):
    """Fixture for a Plugin saved in database."""
    return hosted_app_repository.save(Plugin.create(name="SEO Pro", slug="seo-pro"))


@pytest.fixture
def db_theme(db, hosted_app_repository):
    """Fixture for a Theme saved in database."""
    return hosted_app_repository.save(Theme.create(name="Storefront", slug="storefront"))


@pytest.fixture
def make_license(db, license_repository, db_plugin):
    """Factory fixture for licenses issued to the sample plugin."""

    def _make(**overrides):
        fields = {
            "service_id": "svc-1",
            "license_key": generate_license_key("TST"),
            "max_allowed_domains": 1,
            "end_date": timezone.now() + timedelta(days=365),
        }
        fields.update(overrides)
        license = License.create(**fields).issue_to(db_plugin.binding, db_plugin.id)
        return license_repository.save(license)

    return _make


@pytest.fixture
def db_license(make_license):
    """Fixture for a License issued to the sample plugin with one domain slot."""
    return make_license()


@pytest.fixture
def plugin_request(db_license):
    """Fixture for the request body shared by the license endpoints."""
    return {
        "service_id": db_license.service_id,
        "license_key": db_license.license_key,
        "domain": "https://Example.com",
        "app_type": AppType.PLUGIN.value,
        "app_slug": "seo-pro",
    }


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
