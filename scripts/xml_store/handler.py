"""Generic CRUD over XML container documents.

Every mutation is a full cycle: load the container document, change the
collection in memory, write the whole document back. Reads and writes
each hold the handler's lock; the cycle as a whole does not, so two
concurrent mutations of the same container can lose one of the writes.
"""

from __future__ import annotations

import os
import queue
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from . import codec, conf
from .archive import ArchiveManager
from .errors import InvalidArgumentError, UidExhaustedError
from .events import EventHub, EventKind, Subscriber
from .log import store_log
from .records import Container, IdentifiableObject, Record
from .type_info import TypeInfo
from .workspace import WorkspaceManager

C = TypeVar("C", bound=Container)
R = TypeVar("R", bound=Record)


def new_uid() -> str:
    return str(uuid.uuid4()).upper()


def next_eid(taken: set[int]) -> int:
    """Smallest non-negative integer not in *taken*."""
    eid = 0
    while eid in taken:
        eid += 1
    return eid


def enumerate_items(items: Iterable[R], start: int = 0) -> list[R]:
    """Renumber EIDs sequentially in the given order. Mutates and returns the items."""
    numbered = list(items)
    for eid, item in enumerate(numbered, start):
        item.eid = eid
    return numbered


class DatabaseHandler:
    """Entry point of the store: workspace setup, CRUD and archives.

    Usage::

        handler = DatabaseHandler()
        handler.set_workspace("/tmp/db", [SampleDatabase])
        handler.create_database(SampleDatabase)
        handler.insert(Sample, [Sample(some_data="x")])
        handler.get(Sample, "some_data", "x")
    """

    def __init__(
        self,
        use_default_namespace: bool = True,
        uid_factory: Callable[[], str] = new_uid,
        max_uid_attempts: int = conf.MAX_UID_ATTEMPTS,
        watch_interval: float | None = None,
    ):
        self.use_default_namespace = use_default_namespace
        self.uid_factory = uid_factory
        self.max_uid_attempts = max_uid_attempts
        self.events = EventHub()
        self.workspace = WorkspaceManager(self.events, watch_interval)
        self._lock = threading.Lock()
        self.archive = ArchiveManager(self.workspace, self._lock, self.events)

    # -- Workspace --

    @property
    def current_workspace(self) -> str | None:
        return self.workspace.workspace

    @property
    def current_databases(self) -> tuple[type, ...]:
        return self.workspace.registered_types

    def set_workspace(self, path: str | os.PathLike, types: Iterable[type]) -> str:
        return self.workspace.set_workspace(path, types)

    def clear_handler(self) -> None:
        """Stop watching, delete the workspace directory and drop all state and subscribers."""
        self.workspace.clear()

    # -- Events --

    def subscribe(self, callback: Subscriber, kind: EventKind | None = None) -> Callable[[], None]:
        return self.events.subscribe(callback, kind)

    def listen(self, kind: EventKind | None = None) -> queue.Queue:
        return self.events.listen(kind)

    # -- Identifiers --

    def next_uid(self, existing: Iterable[IdentifiableObject] = ()) -> str:
        """Generate a UID not used by any of *existing*, retrying on collision."""
        taken = {item.uid for item in existing}
        for _ in range(self.max_uid_attempts):
            uid = self.uid_factory()
            if uid not in taken:
                return uid
        raise UidExhaustedError(
            f"Could not generate a unique identifier after {self.max_uid_attempts} attempts",
            attempts=self.max_uid_attempts,
        )

    # -- Document I/O --

    def _load(self, container_type: type[C]) -> C:
        path = self.workspace.path_for(container_type)
        with self._lock:
            return codec.load(path, container_type)

    def _store(self, container: Container) -> Path:
        path = self.workspace.path_for(type(container))
        with self._lock:
            codec.save(container, path, self.use_default_namespace)
        return path

    def _load_collection(self, record_type: type[R]) -> tuple[TypeInfo, list[R]]:
        info = self.workspace.type_info_for(record_type)
        container = self._load(info.container_type)
        return info, info.get_collection(container)

    @staticmethod
    def _require_items(items: Iterable[R] | None) -> list[R]:
        if items is None:
            raise InvalidArgumentError("The parameter items cannot be None")
        return list(items)

    # -- Containers --

    def create_database(self, container_type: type[C]) -> C:
        """Write a fresh, empty container document, replacing any existing one."""
        path = self.workspace.path_for(container_type)
        container = container_type()
        container.uid = self.next_uid()
        with self._lock:
            codec.save(container, path, self.use_default_namespace)
        store_log(f"Created {container_type.__name__} at {path}")
        return container

    def delete_database(self, container_type: type[Container]) -> bool:
        """Remove the container document. Returns False when there was nothing to delete."""
        path = self.workspace.path_for(container_type)
        with self._lock:
            if not path.exists():
                return False
            path.unlink()
        store_log(f"Deleted {container_type.__name__} at {path}")
        return True

    def get_database(self, container_type: type[C]) -> C:
        return self._load(container_type)

    # -- Records --

    def get(
        self,
        record_type: type[R],
        property_name: str | None = None,
        property_value: Any = None,
        *,
        where: Callable[[R], bool] | None = None,
    ) -> list[R]:
        """Return stored records of *record_type*.

        With neither ``property_name`` nor ``property_value`` every record is
        returned; with both, only records whose attribute stringifies to
        ``str(property_value)``. An empty ``property_name`` counts as not
        given. ``where`` further filters with a predicate. Always returns a
        list, empty when nothing matches.
        """
        if bool(property_name) != (property_value is not None):
            raise InvalidArgumentError(
                "property_name and property_value must be given together",
                property_name=property_name,
            )
        _, items = self._load_collection(record_type)
        if property_name:
            expected = str(property_value)
            items = [
                item for item in items
                if getattr(item, property_name, None) is not None
                and str(getattr(item, property_name)) == expected
            ]
        if where is not None:
            items = [item for item in items if where(item)]
        return items

    def count(self, record_type: type[Record]) -> int:
        return len(self._load_collection(record_type)[1])

    def insert(self, record_type: type[R], items: Iterable[R] | None) -> list[R]:
        """Append *items*, assigning each a free EID and a fresh UID. Returns the saved collection."""
        new_items = self._require_items(items)
        _, stored = self._load_collection(record_type)
        taken_eids = {item.eid for item in stored}
        collection = list(stored)
        for item in new_items:
            item.eid = next_eid(taken_eids)
            taken_eids.add(item.eid)
            item.uid = self.next_uid(collection)
            collection.append(item)
        saved = self.save(record_type, collection)
        store_log(f"Inserted {len(new_items)} {record_type.__name__} record(s)")
        return saved

    def remove(self, record_type: type[R], items: Iterable[R] | None) -> list[R]:
        """Drop every stored record sharing a UID with *items*. Unknown UIDs are ignored."""
        doomed = {item.uid for item in self._require_items(items)}
        _, stored = self._load_collection(record_type)
        collection = [item for item in stored if item.uid not in doomed]
        saved = self.save(record_type, collection)
        store_log(f"Removed {len(stored) - len(collection)} {record_type.__name__} record(s)")
        return saved

    def update(self, record_type: type[R], items: Iterable[R] | None) -> list[R]:
        """Replace stored records by UID; replacements are appended at the end."""
        replacements = self._require_items(items)
        replaced = {item.uid for item in replacements}
        _, stored = self._load_collection(record_type)
        collection = [item for item in stored if item.uid not in replaced]
        collection.extend(replacements)
        saved = self.save(record_type, collection)
        store_log(f"Updated {len(replacements)} {record_type.__name__} record(s)")
        return saved

    def save(self, record_type: type[R], items: Iterable[R] | None) -> list[R]:
        """Make *items* the whole collection of *record_type*, renumbering EIDs from 0."""
        collection = self._require_items(items)
        info = self.workspace.type_info_for(record_type)
        container = self._load(info.container_type)
        collection = enumerate_items(collection)
        info.set_collection(container, collection)
        path = self._store(container)
        store_log(f"Saved {len(collection)} {record_type.__name__} record(s) to {path}")
        return collection

    # -- Archives --

    def export_database(self, path_to_save: str | os.PathLike, filename: str,
                        file_extension: str = conf.ARCHIVE_EXTENSION) -> Path:
        return self.archive.export(path_to_save, filename, file_extension)

    def import_database(self, file_to_import: str | os.PathLike,
                        export_path: str | os.PathLike) -> list[Path]:
        return self.archive.import_(file_to_import, export_path)
