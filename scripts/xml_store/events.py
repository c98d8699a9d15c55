"""Store notifications: container changes, archive exports and imports."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Callable

from .log import store_log


class EventKind(StrEnum):
    CHANGED = "changed"
    EXPORTED = "exported"
    IMPORTED = "imported"


@dataclass(frozen=True)
class StoreEvent:
    """``name`` is the container name for CHANGED, a file path otherwise."""

    kind: EventKind
    name: str
    time: datetime = field(default_factory=datetime.now)


Subscriber = Callable[[StoreEvent], None]


class EventHub:
    """Subscriber list plus queue listeners.

    ``emit`` may be called from the watcher thread; callbacks run on the
    emitting thread.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[EventKind | None, Subscriber]] = []
        self._queues: list[tuple[EventKind | None, queue.Queue]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber, kind: EventKind | None = None) -> Callable[[], None]:
        """Call *callback* for every event (or only *kind*). Returns an unsubscribe function."""
        entry = (kind, callback)
        with self._lock:
            self._subscribers.append(entry)

        def _unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return _unsubscribe

    def listen(self, kind: EventKind | None = None) -> queue.Queue:
        """Return a queue that receives every event (or only *kind*) from now on."""
        q: queue.Queue = queue.Queue()
        with self._lock:
            self._queues.append((kind, q))
        return q

    def emit(self, event: StoreEvent) -> None:
        with self._lock:
            subscribers = [cb for kind, cb in self._subscribers if kind in (None, event.kind)]
            queues = [q for kind, q in self._queues if kind in (None, event.kind)]
        for q in queues:
            q.put(event)
        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                store_log(f"Subscriber failed on {event.kind} event for {event.name}: {e}")

    def clear(self) -> None:
        """Detach all subscribers and queue listeners."""
        with self._lock:
            self._subscribers.clear()
            self._queues.clear()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers) + len(self._queues)
