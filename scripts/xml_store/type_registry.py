"""Type registry for container models."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Type

if TYPE_CHECKING:
    from .records import Container


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__name__}"


class TypeRegistry:
    def __init__(self) -> None:
        self._types: dict[str, Type["Container"]] = {}
        self._lock = threading.Lock()

    def register(self, cls: Type["Container"]) -> None:
        with self._lock:
            self._types[qualified_name(cls)] = cls

    def get(self, name: str) -> Type["Container"] | None:
        with self._lock:
            return self._types.get(name)

    def items(self) -> dict[str, Type["Container"]]:
        with self._lock:
            return dict(self._types)


# Global registry
registry = TypeRegistry()
