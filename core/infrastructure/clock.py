"""
Clock port and system implementation.

Domain services read time through a Clock so expiry logic can be
tested against a fixed instant.
"""
from abc import ABC, abstractmethod
from datetime import datetime

from django.utils import timezone


class Clock(ABC):
    """Abstract source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current aware datetime (UTC)."""
        pass

    def timestamp(self) -> int:
        """Return the current unix timestamp in whole seconds."""
        return int(self.now().timestamp())


class SystemClock(Clock):
    """Clock backed by ``django.utils.timezone``."""

    def now(self) -> datetime:
        """Return the current aware datetime (UTC)."""
        return timezone.now()


system_clock = SystemClock()
