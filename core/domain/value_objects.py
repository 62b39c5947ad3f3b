"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    EXPIRED = "expired"
    LIFETIME = "lifetime"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"
    REVOKED = "revoked"
    DEACTIVATED = "deactivated"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @classmethod
    def values(cls) -> frozenset:
        """Return the set of allowed status strings."""
        return frozenset(member.value for member in cls)


class AppType(Enum):
    """Hosted application variant."""

    PLUGIN = "plugin"
    THEME = "theme"
    SOFTWARE = "software"

    def __str__(self) -> str:
        """Return app type as string."""
        return self.value


@dataclass(frozen=True)
class Slug(ValueObject):
    """Application slug value object."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValueError("Slug cannot be empty")
        if not self.value.replace("-", "").replace("_", "").isalnum():
            raise ValueError(f"Invalid slug format: {self.value}")

    def __str__(self) -> str:
        """Return slug as string."""
        return self.value


@dataclass(frozen=True)
class AppBinding(ValueObject):
    """
    Reference to a hosted application by type and slug.

    Serialized as ``"<type>/<slug>"`` in tokens and logs.
    """

    app_type: AppType
    app_slug: str

    def __post_init__(self):
        """Validate binding."""
        if not isinstance(self.app_type, AppType):
            raise ValueError(f"Invalid app type: {self.app_type}")
        Slug(self.app_slug)

    def __str__(self) -> str:
        """Return binding as ``type/slug``."""
        return f"{self.app_type.value}/{self.app_slug}"

    @classmethod
    def parse(cls, value: str) -> "AppBinding":
        """
        Parse a ``type/slug`` string.

        Raises:
            ValueError: If the string is not a valid binding
        """
        if not isinstance(value, str):
            raise ValueError(f"Invalid app binding: {value!r}")
        app_type, sep, app_slug = value.partition("/")
        if not sep:
            raise ValueError(f"Invalid app binding: {value}")
        try:
            return cls(app_type=AppType(app_type), app_slug=app_slug)
        except ValueError as e:
            raise ValueError(f"Invalid app binding: {value}") from e


@dataclass(frozen=True)
class SiteURL(ValueObject):
    """
    A site URL reduced to its host and origin.

    The host is the case-insensitive identity of an activated domain;
    the origin (``scheme://host[:port]``) is kept for display.
    """

    host: str
    origin: str

    @classmethod
    def parse(cls, url: str) -> "SiteURL":
        """
        Normalize a URL or bare host name.

        A missing scheme defaults to ``https``.

        Raises:
            ValueError: If no host can be extracted
        """
        url = (url or "").strip()
        if not url:
            raise ValueError("Domain cannot be empty")
        if "://" not in url:
            url = f"https://{url}"
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        if not host:
            raise ValueError(f"Invalid domain: {url}")
        scheme = (parts.scheme or "https").lower()
        origin = f"{scheme}://{host}"
        if parts.port:
            origin = f"{origin}:{parts.port}"
        return cls(host=host, origin=origin)

    def __str__(self) -> str:
        """Return host as string."""
        return self.host
