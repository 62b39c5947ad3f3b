"""
Bounded retry of a license mutation after a stale-version rejection.

Each attempt runs in its own transaction against the latest stored copy of
the license, so the checks inside the operation (status, quota, site
credential) are always evaluated against fresh data.
"""

import logging
from typing import Callable, Optional, TypeVar

from django.conf import settings
from django.db import transaction

from core.domain.exceptions import ConcurrentModificationError, LicenseNotFoundError
from core.metrics import license_save_conflicts_total
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

T = TypeVar("T")


def run_with_conflict_retry(
    license: License,
    license_repository: LicenseRepository,
    operation: Callable[[License], T],
    max_attempts: Optional[int] = None,
) -> T:
    """
    Run ``operation(license)`` in a transaction, retrying on version conflicts.

    Args:
        license: License as last read
        license_repository: Repository to reload the license from
        operation: Mutation to apply; receives the license to work on
        max_attempts: Attempts before giving up (defaults to ``LICENSE_SAVE_MAX_ATTEMPTS``)

    Returns:
        Whatever ``operation`` returns

    Raises:
        ConcurrentModificationError: If every attempt lost the race
        LicenseNotFoundError: If the license disappeared between attempts
    """
    if max_attempts is None:
        max_attempts = getattr(settings, "LICENSE_SAVE_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
    max_attempts = max(max_attempts, 1)

    attempt = 1
    while True:
        try:
            with transaction.atomic():
                return operation(license)
        except ConcurrentModificationError:
            license_save_conflicts_total.inc()
            logger.warning(
                "License write conflict",
                extra={"license_id": license.id, "attempt": attempt},
            )
            if attempt >= max_attempts:
                raise
            fresh = license_repository.reload(license.id)
            if fresh is None:
                raise LicenseNotFoundError()
            license = fresh
            attempt += 1
