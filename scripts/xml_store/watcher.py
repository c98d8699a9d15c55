"""Workspace directory watcher.

Polls last-write times on a daemon thread and turns changes to container
documents into ``CHANGED`` events. The watcher never takes the store's
I/O lock.
"""

from __future__ import annotations

import os
import threading
from datetime import datetime
from pathlib import Path

from . import conf
from .events import EventHub, EventKind, StoreEvent
from .log import store_log


def _snapshot(directory: Path) -> dict[str, int]:
    snapshot: dict[str, int] = {}
    try:
        entries = list(os.scandir(directory))
    except FileNotFoundError:
        return snapshot
    for entry in entries:
        try:
            if entry.is_file():
                snapshot[entry.name] = entry.stat().st_mtime_ns
        except FileNotFoundError:
            continue  # removed between scandir and stat
    return snapshot


class DirectoryWatcher:
    """Raise a CHANGED event when a ``*.xml`` document in *directory* is rewritten.

    Debounce is alternating, not time based: a change on the same file as
    the previous change is swallowed and clears the remembered name, so
    the third consecutive change on one file fires again.
    """

    def __init__(self, directory: str | Path, events: EventHub, interval: float | None = None):
        self.directory = Path(directory)
        self.events = events
        self.interval = conf.WATCH_INTERVAL if interval is None else interval
        self.last_changed = ""
        self._known: dict[str, int] = {}
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._known = _snapshot(self.directory)
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"xml-store-watch:{self.directory.name}", daemon=True
        )
        self._thread.start()
        store_log(f"Watching {self.directory}")

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.interval * 5, 1.0))
            store_log(f"Stopped watching {self.directory}")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()

    def poll(self) -> None:
        """Compare the directory against the last scan and dispatch differences."""
        current = _snapshot(self.directory)
        for name, mtime in current.items():
            previous = self._known.get(name)
            if previous is None:
                store_log(f"Created {self.directory / name}")
            elif previous != mtime:
                self.handle_change(name)
        for name in self._known.keys() - current.keys():
            store_log(f"Deleted {self.directory / name}")
        self._known = current

    def handle_change(self, name: str) -> StoreEvent | None:
        """Apply the alternating debounce to one change. Returns the emitted event, if any."""
        event = None
        if name != self.last_changed:
            if name.endswith(conf.DOCUMENT_EXTENSION):
                database_name = name[: -len(conf.DOCUMENT_EXTENSION)]
                event = StoreEvent(EventKind.CHANGED, database_name, datetime.now())
                self.events.emit(event)
            self.last_changed = name
        else:
            self.last_changed = ""
        store_log(f"Changed {self.directory / name}")
        return event
