"""
Property-based tests for DocIndexConfig serialization, environment
overrides and validation.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from docindex.core.config import (
    ConfigurationError,
    DocIndexConfig,
    EmbeddingConfig,
    IndexingConfig,
    LoggingConfig,
    SearchConfig,
    VectorStoreConfig,
    load_config,
)

# Strategies for generating valid configuration values
safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters="\x00\n\r\t",
    ),
    min_size=1,
    max_size=50,
).filter(lambda s: s.strip() != "")

safe_url = st.from_regex(r"https?://[a-z0-9]+(\.[a-z0-9]+)*(:[0-9]+)?(/[a-z0-9]*)*", fullmatch=True)

pattern = st.from_regex(r"[a-zA-Z0-9_\-\*\./]+", fullmatch=True)

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def config_strategy(draw):
    """Generate valid DocIndexConfig instances."""
    chunk_size = draw(st.integers(min_value=1, max_value=10000))
    return DocIndexConfig(
        embedding=EmbeddingConfig(
            provider=draw(st.sampled_from(["local", "openai"])),
            model=draw(safe_text),
            api_url=draw(safe_url),
            api_key=draw(safe_text),
            dimension=draw(st.integers(min_value=1, max_value=4096)),
            batch_size=draw(st.integers(min_value=1, max_value=1000)),
            max_retries=draw(st.integers(min_value=0, max_value=10)),
            timeout=draw(st.floats(min_value=0.1, max_value=300, allow_nan=False)),
            fallback_to_zero_vector=draw(st.booleans()),
        ),
        vector_store=VectorStoreConfig(
            collection_name=draw(safe_text),
            url=draw(st.one_of(st.just(""), safe_url)),
            api_key=draw(safe_text),
        ),
        indexing=IndexingConfig(
            chunk_size=chunk_size,
            chunk_overlap=draw(st.integers(min_value=0, max_value=chunk_size)),
            include_patterns=draw(st.lists(pattern, max_size=5)),
            exclude_patterns=draw(st.lists(pattern, max_size=5)),
            extraction_timeout=draw(st.floats(min_value=0.1, max_value=600, allow_nan=False)),
            max_file_size_mb=draw(st.integers(min_value=1, max_value=1000)),
            detect_mtime_changes=draw(st.booleans()),
            store_dir_name=draw(st.from_regex(r"\.?[a-z]{1,12}", fullmatch=True)),
        ),
        search=SearchConfig(default_limit=draw(st.integers(min_value=1, max_value=100))),
        logging=LoggingConfig(level=draw(log_level)),
    )


@given(config=config_strategy())
@settings(max_examples=50, deadline=None)
def test_yaml_round_trip(config):
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.yaml"
        config.save(path)
        assert DocIndexConfig.from_file(path) == config


@given(config=config_strategy())
@settings(max_examples=50, deadline=None)
def test_json_round_trip(config):
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        config.save(path)
        assert DocIndexConfig.from_file(path) == config


def test_defaults():
    config = DocIndexConfig()
    assert config.embedding.provider == "local"
    assert config.embedding.dimension == 384
    assert config.indexing.chunk_size == 1000
    assert config.indexing.chunk_overlap == 200
    assert config.indexing.detect_mtime_changes is True
    assert config.indexing.store_dir_name == ".docindex"
    assert config.vector_store.collection_name == "chunks"
    assert config.search.default_limit == 10
    config.validate()


def test_partial_file_keeps_other_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("indexing:\n  chunk_size: 500\n", encoding="utf-8")

    config = DocIndexConfig.from_file(path)

    assert config.indexing.chunk_size == 500
    assert config.indexing.chunk_overlap == 200
    assert config.embedding.provider == "local"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DocIndexConfig.from_file(tmp_path / "absent.yaml")


def test_unsupported_format(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        DocIndexConfig.from_file(path)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DOCINDEX_EMBEDDING_PROVIDER", "openai")
    monkeypatch.setenv("DOCINDEX_EMBEDDING_DIMENSION", "1536")
    monkeypatch.setenv("DOCINDEX_INDEXING_CHUNK_SIZE", "750")
    monkeypatch.setenv("DOCINDEX_INDEXING_EXCLUDE_PATTERNS", "drafts/, *.csv ,")
    monkeypatch.setenv("DOCINDEX_INDEXING_DETECT_MTIME_CHANGES", "no")
    monkeypatch.setenv("DOCINDEX_VECTOR_STORE_URL", "http://localhost:6333")

    config = load_config()

    assert config.embedding.provider == "openai"
    assert config.embedding.dimension == 1536
    assert config.indexing.chunk_size == 750
    assert config.indexing.exclude_patterns == ["drafts/", "*.csv"]
    assert config.indexing.detect_mtime_changes is False
    assert config.vector_store.url == "http://localhost:6333"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("search:\n  default_limit: 5\n", encoding="utf-8")
    monkeypatch.setenv("DOCINDEX_SEARCH_DEFAULT_LIMIT", "7")

    assert load_config(path).search.default_limit == 7
    assert load_config(path, apply_env=False).search.default_limit == 5


@pytest.mark.parametrize(
    "section, key, value",
    [
        ("indexing", "chunk_size", 0),
        ("indexing", "chunk_overlap", -1),
        ("indexing", "extraction_timeout", 0),
        ("embedding", "provider", "word2vec"),
        ("embedding", "dimension", 0),
        ("search", "default_limit", 0),
    ],
)
def test_validate_rejects_out_of_range(section, key, value):
    config = DocIndexConfig()
    setattr(getattr(config, section), key, value)
    with pytest.raises(ConfigurationError):
        config.validate()


def test_validate_rejects_conflicting_patterns():
    config = DocIndexConfig()
    config.indexing.include_patterns = ["*.md", "*.txt"]
    config.indexing.exclude_patterns = ["*.md"]
    with pytest.raises(ConfigurationError, match=r"\*\.md"):
        config.validate()


def test_overlap_larger_than_size_is_allowed():
    config = DocIndexConfig()
    config.indexing.chunk_size = 10
    config.indexing.chunk_overlap = 50
    config.validate()
