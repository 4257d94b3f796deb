"""
Tests for service wiring and index removal.
"""

from pathlib import Path

from docindex.core.config import DocIndexConfig
from docindex.infrastructure.embedding import ZeroVectorFallbackClient
from docindex.infrastructure.vector_store import QdrantVectorStore
from docindex.services import create_services, remove_index, resolve_store_dir
from tests.indexing_test_utils import run_async, write_file


def _config(**indexing) -> DocIndexConfig:
    config = DocIndexConfig()
    for key, value in indexing.items():
        setattr(config.indexing, key, value)
    return config


def test_default_wiring(tmp_path):
    config = _config(chunk_size=500, chunk_overlap=50)
    container = create_services(config, tmp_path / "store")

    assert container.store_dir == (tmp_path / "store").resolve()
    assert isinstance(container.embedding_client, ZeroVectorFallbackClient)
    assert isinstance(container.vector_store, QdrantVectorStore)
    assert container.vector_store.is_local
    assert container.state_store.path.name == "index_state.json"
    assert container.chunker.get_config().chunk_size == 500
    assert container.search_service() is not None
    run_async(container.close())


def test_visible_store_inside_root_is_excluded(tmp_path):
    root = tmp_path / "docs"
    write_file(root, "lib/a.md", "A.")
    write_file(root, "index-data/notes.md", "Not documentation.")

    container = create_services(DocIndexConfig(), root / "index-data", root_path=root)
    files = container.file_scanner.scan(root)

    assert [f.relative_path for f in files] == ["lib/a.md"]


def test_store_outside_root_adds_no_exclude(tmp_path):
    container = create_services(DocIndexConfig(), tmp_path / "store", root_path=tmp_path / "docs")
    assert container.file_scanner.exclude_patterns == []


def test_resolve_store_dir_uses_configured_name(tmp_path):
    config = _config(store_dir_name=".idx")
    assert resolve_store_dir(tmp_path, config=config) == tmp_path.resolve() / ".idx"
    assert resolve_store_dir(tmp_path, tmp_path / "db", config) == (tmp_path / "db").resolve()


def test_remove_index(tmp_path):
    store = tmp_path / "store"
    write_file(store, "index_state.json", "{}")
    (store / "vectors").mkdir()

    assert remove_index(store)
    assert not store.exists()


def test_remove_index_missing(tmp_path):
    assert not remove_index(tmp_path / "absent")


def test_remove_index_refuses_foreign_directory(tmp_path):
    keep = write_file(tmp_path / "important", "notes.md", "keep me")

    assert not remove_index(Path(tmp_path / "important"))
    assert keep.exists()
