"""Derive where a record type is stored: its container and collection field."""

from __future__ import annotations

import types
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Optional, Union, get_args, get_origin

from . import conf
from .errors import ResolutionError
from .observable import ObservableList
from .records import Container, IdentifiableObject, Record, is_container_type
from .type_registry import registry


class CollectionKind(str, Enum):
    """Declared shape of a container's collection field."""

    ARRAY = "array"            # tuple[R, ...]
    OBSERVABLE = "observable"  # ObservableList[R]
    LIST = "list"              # list[R]

    def build(self, items: Iterable[Any]):
        if self is CollectionKind.ARRAY:
            return tuple(items)
        if self is CollectionKind.OBSERVABLE:
            return ObservableList(items)
        return list(items)


@dataclass(frozen=True)
class TypeInfo:
    record_type: type[Record]
    container_type: type[Container]
    collection_field: str
    collection_kind: CollectionKind
    item_type: Any

    def get_collection(self, container: Container) -> list:
        """Copy of the container's collection as a plain list (empty when unset)."""
        items = getattr(container, self.collection_field)
        return [] if items is None else list(items)

    def set_collection(self, container: Container, items: Iterable[Any]) -> None:
        setattr(container, self.collection_field, self.collection_kind.build(items))


def unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def collection_shape(annotation: Any) -> Optional[tuple[CollectionKind, Any]]:
    """Return ``(kind, item_type)`` when *annotation* is a homogeneous collection."""
    annotation = unwrap_optional(annotation)
    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return CollectionKind.ARRAY, args[0]
        return None
    if origin is ObservableList and len(args) == 1:
        return CollectionKind.OBSERVABLE, args[0]
    if origin is list and len(args) == 1:
        return CollectionKind.LIST, args[0]
    return None


def container_name_for(record_type: type) -> str:
    return f"{record_type.__module__}.{record_type.__name__}{conf.CONTAINER_SUFFIX}"


def find_collection_field(container_type: type[IdentifiableObject]) -> tuple[str, CollectionKind, Any]:
    for name, field_info in container_type.model_fields.items():
        shape = collection_shape(field_info.annotation)
        if shape is not None:
            return name, shape[0], shape[1]
    raise ResolutionError(
        f"Could not find a collection field on {container_type.__name__}",
        container_type=container_type.__name__,
    )


@lru_cache(maxsize=None)
def resolve_type_info(record_type: type[Record]) -> TypeInfo:
    """Resolve and cache the TypeInfo of *record_type*.

    Failures are not cached: a container defined later resolves on the
    next call.
    """
    name = container_name_for(record_type)
    container_type = registry.get(name)
    if container_type is None or not is_container_type(container_type):
        raise ResolutionError(
            f"Could not find a Container implementation with name {name}",
            record_type=record_type.__name__,
        )
    field_name, kind, item_type = find_collection_field(container_type)
    return TypeInfo(
        record_type=record_type,
        container_type=container_type,
        collection_field=field_name,
        collection_kind=kind,
        item_type=item_type,
    )
