"""File-backed XML object store."""

from .archive import ArchiveManager
from .codec import deserialize, from_string, load, save, serialize, to_string
from .errors import (
    FormatError,
    InvalidArgumentError,
    NotFoundError,
    ResolutionError,
    StoreError,
    TypeMismatchError,
    UidExhaustedError,
)
from .events import EventHub, EventKind, StoreEvent
from .handler import DatabaseHandler
from .observable import ObservableList
from .records import Container, IdentifiableObject, Record
from .type_info import CollectionKind, TypeInfo, resolve_type_info
from .type_registry import registry as type_registry
from .watcher import DirectoryWatcher
from .workspace import WorkspaceManager

__all__ = [
    "ArchiveManager",
    "CollectionKind",
    "Container",
    "DatabaseHandler",
    "DirectoryWatcher",
    "EventHub",
    "EventKind",
    "FormatError",
    "IdentifiableObject",
    "InvalidArgumentError",
    "NotFoundError",
    "ObservableList",
    "Record",
    "ResolutionError",
    "StoreError",
    "StoreEvent",
    "TypeInfo",
    "TypeMismatchError",
    "UidExhaustedError",
    "WorkspaceManager",
    "deserialize",
    "from_string",
    "load",
    "resolve_type_info",
    "save",
    "serialize",
    "to_string",
    "type_registry",
]
