"""A list that tells its observers when it changes."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

T = TypeVar("T")

Observer = Callable[[str, Any], None]


class ObservableList(list, Generic[T]):
    """``list`` subclass that calls every observer as ``observer(action, payload)``.

    Actions are ``"append"``, ``"extend"``, ``"insert"``, ``"remove"``,
    ``"set"``, ``"delete"``, ``"clear"``, ``"repeat"``, ``"sort"`` and
    ``"reverse"``; ``+=`` reports as ``"extend"``. Copies, deep copies and
    pickles carry the items only, observers stay with the original.
    """

    def __init__(self, iterable: Iterable[T] = ()):
        super().__init__(iterable)
        self._observers: list[Observer] = []

    def observe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer. Returns a callable that detaches it."""
        self._observers.append(observer)

        def _detach() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _detach

    def _notify(self, action: str, payload: Any) -> None:
        for observer in list(self._observers):
            observer(action, payload)

    def append(self, item: T) -> None:
        super().append(item)
        self._notify("append", item)

    def extend(self, items: Iterable[T]) -> None:
        items = list(items)
        super().extend(items)
        self._notify("extend", items)

    def insert(self, index: int, item: T) -> None:
        super().insert(index, item)
        self._notify("insert", item)

    def remove(self, item: T) -> None:
        super().remove(item)
        self._notify("remove", item)

    def pop(self, index: int = -1) -> T:
        item = super().pop(index)
        self._notify("remove", item)
        return item

    def clear(self) -> None:
        super().clear()
        self._notify("clear", None)

    def __setitem__(self, index, value) -> None:
        super().__setitem__(index, value)
        self._notify("set", value)

    def __delitem__(self, index) -> None:
        super().__delitem__(index)
        self._notify("delete", index)

    def __iadd__(self, items: Iterable[T]) -> ObservableList[T]:
        self.extend(items)
        return self

    def __imul__(self, count: int) -> ObservableList[T]:
        super().__imul__(count)
        self._notify("repeat", count)
        return self

    def sort(self, *, key=None, reverse: bool = False) -> None:
        super().sort(key=key, reverse=reverse)
        self._notify("sort", None)

    def reverse(self) -> None:
        super().reverse()
        self._notify("reverse", None)

    def copy(self) -> ObservableList[T]:
        return ObservableList(self)

    def __reduce_ex__(self, protocol):
        return type(self), (list(self),)

    def __repr__(self) -> str:
        return f"ObservableList({list.__repr__(self)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        args = get_args(source_type)
        item_schema = handler.generate_schema(args[0]) if args else core_schema.any_schema()
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.list_schema(item_schema),
            serialization=core_schema.plain_serializer_function_ser_schema(list),
        )
