"""Pytest fixtures for store testing."""

import pytest

from xml_store import DatabaseHandler, conf
from xml_store.log import store_log_clear
from tests.test_utils import NoteDatabase, PointDatabase, Sample, SampleDatabase


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    """Keep test runs from writing into the user's store log."""
    monkeypatch.setattr(conf, "LOG_FILE", tmp_path / "logs" / "store.log")
    monkeypatch.setattr(conf, "LOG_TO_STDERR", False)
    yield conf.LOG_FILE
    store_log_clear()


@pytest.fixture
def workspace_dir(tmp_path):
    return tmp_path / "workspace"


@pytest.fixture
def handler(workspace_dir):
    """A handler with Sample, Note and Point containers registered and created."""
    dh = DatabaseHandler(watch_interval=0.05)
    dh.set_workspace(workspace_dir, [SampleDatabase, NoteDatabase, PointDatabase])
    dh.create_database(SampleDatabase)
    dh.create_database(NoteDatabase)
    dh.create_database(PointDatabase)
    yield dh
    dh.clear_handler()


@pytest.fixture
def ten_samples(handler):
    handler.insert(Sample, [Sample(some_data=f"Data{i}", amount=i) for i in range(10)])
    return handler
