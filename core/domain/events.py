"""
Domain events.

Handlers publish an event after their write has committed. Subscribers
(currently only the audit log) must not be able to fail the operation
that raised the event.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for all domain events.

    Subclasses call ``super().__init__`` with the id of the license the
    event concerns and then set their own attributes, which make up the
    event payload.
    """

    aggregate_id: str
    occurred_at: Optional[datetime] = None
    event_id: Optional[UUID] = None

    event_type: ClassVar[str] = "DomainEvent"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.event_type = cls.__name__

    def __post_init__(self):
        if self.event_id is None:
            object.__setattr__(self, "event_id", uuid4())
        if self.occurred_at is None:
            object.__setattr__(self, "occurred_at", timezone.now())

    def payload(self) -> Dict[str, Any]:
        """Return the subclass attributes, with non-primitive values as strings."""
        envelope = {f.name for f in fields(DomainEvent)}
        return {
            name: value if isinstance(value, (int, str, bool)) or value is None else str(value)
            for name, value in vars(self).items()
            if name not in envelope
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to a flat dictionary for logging."""
        data = self.payload()
        data.update(
            event_id=str(self.event_id),
            occurred_at=self.occurred_at.isoformat(),
            aggregate_id=self.aggregate_id,
            event_type=self.event_type,
        )
        return data


class EventHandler(ABC):
    """Receives published domain events."""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """


class EventBus(ABC):
    """Routes domain events to the handlers subscribed to their type."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Deliver an event to its subscribers."""

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe a handler to one event type.

        Args:
            event_type: DomainEvent subclass
            handler: Handler to call for each published event of that type
        """
