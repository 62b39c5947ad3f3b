"""
In-process event bus.

Handlers run synchronously in the publishing request, after the
command's own work has been committed.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    Event bus that dispatches by exact event type.

    A failing handler is logged and does not affect the other handlers
    or the publisher.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Subscribe a handler; subscribing the same handler twice is a no-op."""
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """
        Deliver an event to every handler subscribed to its type.

        Args:
            event: The domain event to publish
        """
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler.handle(event)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.error(
                    "%s failed on %s for license %s",
                    type(handler).__name__,
                    event.event_type,
                    event.aggregate_id,
                    exc_info=True,
                )

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._handlers.clear()


event_bus = InMemoryEventBus()
