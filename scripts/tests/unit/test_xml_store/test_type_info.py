"""Tests for type metadata resolution and the container registry."""

import pytest

from xml_store import CollectionKind, ObservableList, ResolutionError, resolve_type_info, type_registry
from xml_store.type_info import collection_shape, container_name_for
from tests.test_utils import (
    Flat,
    Note,
    NoteDatabase,
    Orphan,
    Point,
    PointDatabase,
    Sample,
    SampleDatabase,
)


class TestResolve:
    def test_resolves_container_by_name(self):
        info = resolve_type_info(Sample)
        assert info.record_type is Sample
        assert info.container_type is SampleDatabase
        assert info.collection_field == "test_objects"
        assert info.collection_kind is CollectionKind.LIST
        assert info.item_type is Sample

    def test_skips_non_collection_fields(self):
        info = resolve_type_info(Note)
        assert info.container_type is NoteDatabase
        assert info.collection_field == "notes"
        assert info.collection_kind is CollectionKind.OBSERVABLE

    def test_tuple_collection(self):
        info = resolve_type_info(Point)
        assert info.container_type is PointDatabase
        assert info.collection_kind is CollectionKind.ARRAY

    def test_result_is_cached(self):
        assert resolve_type_info(Sample) is resolve_type_info(Sample)

    def test_missing_container_raises(self):
        with pytest.raises(ResolutionError, match="OrphanDatabase"):
            resolve_type_info(Orphan)

    def test_container_without_collection_raises(self):
        with pytest.raises(ResolutionError, match="collection field"):
            resolve_type_info(Flat)

    def test_container_name_convention(self):
        assert container_name_for(Sample) == f"{Sample.__module__}.SampleDatabase"


class TestRegistry:
    def test_containers_register_on_definition(self):
        assert type_registry.get(container_name_for(Sample)) is SampleDatabase

    def test_records_are_not_registered(self):
        assert f"{Sample.__module__}.Sample" not in type_registry.items()


class TestAccessors:
    def test_get_collection_returns_copy(self):
        info = resolve_type_info(Sample)
        db = SampleDatabase(test_objects=[Sample(uid="a")])
        items = info.get_collection(db)
        items.clear()
        assert len(db.test_objects) == 1

    @pytest.mark.parametrize(
        "record_type, container, expected",
        [
            (Sample, SampleDatabase(), list),
            (Note, NoteDatabase(), ObservableList),
            (Point, PointDatabase(), tuple),
        ],
    )
    def test_set_collection_converts_to_declared_kind(self, record_type, container, expected):
        info = resolve_type_info(record_type)
        info.set_collection(container, [record_type(uid="x")])
        value = getattr(container, info.collection_field)
        assert type(value) is expected
        assert len(value) == 1


class TestCollectionShape:
    def test_optional_list(self):
        assert collection_shape(list[int] | None) == (CollectionKind.LIST, int)

    def test_heterogeneous_tuple_is_not_a_collection(self):
        assert collection_shape(tuple[int, str]) is None

    def test_scalar_is_not_a_collection(self):
        assert collection_shape(str) is None
