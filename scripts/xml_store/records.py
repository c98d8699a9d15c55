"""Base models for everything the store persists.

A *container* is one XML document per type; a *record* is an item inside
one of its collections. Records find their container by name:
``pkg.mod.Sample`` belongs to ``pkg.mod.SampleDatabase``.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class IdentifiableObject(BaseModel):
    """Anything carrying a store-assigned unique identifier."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    # field name -> XML attribute name; every other field is a child element
    xml_attributes: ClassVar[dict[str, str]] = {"uid": "GUID"}

    uid: str = Field(default="")


class Container(IdentifiableObject):
    """Root persisted document. Subclasses register themselves on definition."""

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs):
        super().__pydantic_init_subclass__(**kwargs)
        from .type_registry import registry

        registry.register(cls)


class Record(IdentifiableObject):
    """An item stored in a container's collection."""

    xml_attributes: ClassVar[dict[str, str]] = {"eid": "EID", "uid": "GUID"}

    eid: int = Field(default=0, ge=0)


def is_container_type(candidate: object) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Container)


def is_record_type(candidate: object) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Record)
