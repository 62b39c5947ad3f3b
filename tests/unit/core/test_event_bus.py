"""
Unit tests for the in-memory event bus and audit handler.
"""

import logging

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import AuditLogEventHandler
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.events import LicenseDeleted, LicenseIssued


class RecordingHandler(EventHandler):
    """Handler that remembers what it saw."""

    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


class FailingHandler(EventHandler):
    """Handler that always fails."""

    def handle(self, event):
        raise RuntimeError("boom")


class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    def test_publish_reaches_subscribers_of_that_type(self):
        """Test events are routed by type."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseIssued, handler)

        issued = LicenseIssued(license_id=1, service_id="svc", app_binding="plugin/x")
        bus.publish(issued)
        bus.publish(LicenseDeleted(license_id=1, tokens_deleted=0))

        assert handler.events == [issued]

    def test_subscribe_is_idempotent(self):
        """Test subscribing twice delivers once."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseIssued, handler)
        bus.subscribe(LicenseIssued, handler)

        bus.publish(LicenseIssued(license_id=1, service_id="svc", app_binding="plugin/x"))

        assert len(handler.events) == 1

    def test_failing_handler_does_not_stop_others(self):
        """Test one handler's error is isolated."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseIssued, FailingHandler())
        bus.subscribe(LicenseIssued, handler)

        bus.publish(LicenseIssued(license_id=1, service_id="svc", app_binding="plugin/x"))

        assert len(handler.events) == 1

    def test_event_defaults(self):
        """Test event id, timestamp and aggregate id are filled in."""
        event = LicenseIssued(license_id=7, service_id="svc", app_binding="plugin/x")
        data = event.to_dict()
        assert data["aggregate_id"] == "7"
        assert data["event_type"] == "LicenseIssued"
        assert event.event_id is not None
        assert event.occurred_at is not None


class TestAuditLogEventHandler:
    """Tests for AuditLogEventHandler."""

    def test_logs_event_fields(self, caplog):
        """Test the audit record carries the event attributes."""
        handler = AuditLogEventHandler()
        event = LicenseDeleted(license_id=3, tokens_deleted=2)

        with caplog.at_level(logging.INFO, logger="audit"):
            handler.handle(event)

        record = caplog.records[-1]
        assert record.event_type == "LicenseDeleted"
        assert record.tokens_deleted == 2
        assert record.license_id == 3
