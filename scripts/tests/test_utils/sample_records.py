"""Record and container models used across the store tests.

Each record lives next to its ``<Name>Database`` container: the store
finds containers by that naming convention.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from xml_store import Container, ObservableList, Record


class Sample(Record):
    some_data: str | None = None
    amount: int = 0


class SampleDatabase(Container):
    test_objects: list[Sample] = Field(default_factory=list)


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"


class Note(Record):
    text: str = ""
    tags: list[str] = Field(default_factory=list)
    pinned: bool = False
    priority: Priority = Priority.LOW
    created: datetime | None = None


class NoteDatabase(Container):
    title: str = "notes"
    notes: ObservableList[Note] = Field(default_factory=ObservableList)


class Point(Record):
    x: float = 0.0
    y: float = 0.0


class PointDatabase(Container):
    points: tuple[Point, ...] = ()


class Orphan(Record):
    """No OrphanDatabase exists."""

    value: str = ""


class Flat(Record):
    value: str = ""


class FlatDatabase(Container):
    """A container without any collection field."""

    label: str = ""
