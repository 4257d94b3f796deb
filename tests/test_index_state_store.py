"""
Tests for the JSON fingerprint store.
"""

import json

import pytest

from docindex.core.index_state import FileState, IndexState
from docindex.infrastructure.index_state import STATE_FILE_NAME, IndexStateError, IndexStateStore


@pytest.fixture
def store(tmp_path):
    return IndexStateStore(tmp_path / "store" / STATE_FILE_NAME)


def _state() -> IndexState:
    state = IndexState()
    state.set(
        "/docs/b.md",
        FileState(content_hash="b" * 64, last_modified="2024-01-02T00:00:00+00:00", chunk_count=2),
    )
    state.set(
        "/docs/a.md",
        FileState(
            content_hash="a" * 64,
            last_modified="2024-01-01T00:00:00+00:00",
            chunk_count=1,
            relative_path="a.md",
        ),
    )
    return state


def test_missing_file_loads_empty(store):
    state = store.load()
    assert state.files == {}
    assert state.last_updated is None


def test_save_and_load(store):
    store.save(_state())
    loaded = store.load()

    assert set(loaded.files) == {"/docs/a.md", "/docs/b.md"}
    assert loaded.get("/docs/b.md").chunk_count == 2
    assert loaded.total_chunks == 3
    assert loaded.last_updated is not None


def test_file_layout(store):
    store.save(_state())
    data = json.loads(store.path.read_text(encoding="utf-8"))

    assert list(data["files"]) == ["/docs/a.md", "/docs/b.md"]
    assert data["files"]["/docs/a.md"] == {
        "content_hash": "a" * 64,
        "last_modified": "2024-01-01T00:00:00+00:00",
        "chunk_count": 1,
        "relative_path": "a.md",
    }
    assert isinstance(data["last_updated"], str)


def test_save_leaves_no_temporary_files(store):
    store.save(_state())
    store.save(_state())
    assert [p.name for p in store.path.parent.iterdir()] == [STATE_FILE_NAME]


def test_corrupt_file_raises(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(IndexStateError):
        store.load()


def test_missing_fields_raise(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(json.dumps({"files": {"/docs/a.md": {}}}), encoding="utf-8")
    with pytest.raises(IndexStateError):
        store.load()


def test_clear(store):
    store.save(_state())
    store.clear()
    assert not store.path.exists()
    store.clear()


def test_remove_entry():
    state = _state()
    state.remove("/docs/a.md")
    state.remove("/docs/never-indexed.md")
    assert list(state.files) == ["/docs/b.md"]
