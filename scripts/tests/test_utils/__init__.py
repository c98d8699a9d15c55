"""Test utilities package."""

from .sample_records import (
    Flat,
    FlatDatabase,
    Note,
    NoteDatabase,
    Orphan,
    Point,
    PointDatabase,
    Priority,
    Sample,
    SampleDatabase,
)

__all__ = [
    "Flat",
    "FlatDatabase",
    "Note",
    "NoteDatabase",
    "Orphan",
    "Point",
    "PointDatabase",
    "Priority",
    "Sample",
    "SampleDatabase",
]
