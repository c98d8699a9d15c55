"""Tests for EventHub and the store error types."""

import queue
from datetime import datetime

from xml_store import EventHub, EventKind, NotFoundError, StoreEvent, StoreError
from xml_store.errors import InvalidArgumentError


def _event(kind=EventKind.CHANGED, name="SampleDatabase"):
    return StoreEvent(kind, name, datetime(2024, 1, 1))


class TestEventHub:
    def test_subscribers_receive_events(self):
        hub = EventHub()
        got = []
        hub.subscribe(got.append)
        hub.emit(_event())
        assert got == [_event()]

    def test_kind_filter(self):
        hub = EventHub()
        got = []
        hub.subscribe(got.append, EventKind.EXPORTED)
        hub.emit(_event(EventKind.CHANGED))
        hub.emit(_event(EventKind.EXPORTED, "/tmp/x.db"))
        assert [e.kind for e in got] == [EventKind.EXPORTED]

    def test_unsubscribe(self):
        hub = EventHub()
        got = []
        unsubscribe = hub.subscribe(got.append)
        unsubscribe()
        unsubscribe()
        hub.emit(_event())
        assert got == []

    def test_listen_queue(self):
        hub = EventHub()
        q = hub.listen(EventKind.IMPORTED)
        hub.emit(_event(EventKind.CHANGED))
        hub.emit(_event(EventKind.IMPORTED, "/tmp/a.xml"))
        assert q.get_nowait().name == "/tmp/a.xml"
        assert q.empty()

    def test_failing_subscriber_does_not_block_others(self, isolated_log):
        hub = EventHub()
        got = []

        def boom(event):
            raise RuntimeError("boom")

        hub.subscribe(boom)
        hub.subscribe(got.append)
        hub.emit(_event())
        assert len(got) == 1
        assert "boom" in isolated_log.read_text(encoding="utf-8")

    def test_clear(self):
        hub = EventHub()
        hub.subscribe(lambda e: None)
        q = hub.listen()
        hub.clear()
        hub.emit(_event())
        assert hub.subscriber_count == 0
        assert isinstance(q, queue.Queue) and q.empty()

    def test_event_time_defaults_to_now(self):
        before = datetime.now()
        event = StoreEvent(EventKind.CHANGED, "x")
        assert event.time >= before


class TestErrors:
    def test_builtin_compatibility(self):
        assert issubclass(NotFoundError, FileNotFoundError)
        assert issubclass(InvalidArgumentError, ValueError)

    def test_to_dict(self):
        err = NotFoundError("missing", path="/tmp/x.xml")
        assert err.to_dict() == {
            "error_type": "NotFoundError",
            "message": "missing",
            "context": {"path": "/tmp/x.xml"},
        }
        assert isinstance(err, StoreError)
        assert str(err) == "missing"
