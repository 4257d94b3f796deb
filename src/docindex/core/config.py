"""
Configuration module for docindex.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


class ConfigurationError(ValueError):
    """Raised when configuration values are invalid or contradictory."""

    pass


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    return section_defaults.get(key, fallback)


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding model."""

    provider: str = field(default_factory=lambda: _get_default("embedding", "provider", "local"))
    model: str = field(
        default_factory=lambda: _get_default(
            "embedding", "model", "sentence-transformers/all-MiniLM-L6-v2"
        )
    )
    api_url: str = field(
        default_factory=lambda: _get_default(
            "embedding", "api_url", "https://api.openai.com/v1/embeddings"
        )
    )
    api_key: str = field(default_factory=lambda: _get_default("embedding", "api_key", ""))
    dimension: int = field(default_factory=lambda: _get_default("embedding", "dimension", 384))
    batch_size: int = field(default_factory=lambda: _get_default("embedding", "batch_size", 64))
    max_retries: int = field(default_factory=lambda: _get_default("embedding", "max_retries", 3))
    timeout: float = field(default_factory=lambda: _get_default("embedding", "timeout", 30.0))
    fallback_to_zero_vector: bool = field(
        default_factory=lambda: _get_default("embedding", "fallback_to_zero_vector", True)
    )


@dataclass
class VectorStoreConfig:
    """Configuration for the Qdrant vector store.

    An empty ``url`` selects the embedded on-disk store inside the index
    directory.
    """

    collection_name: str = field(
        default_factory=lambda: _get_default("vector_store", "collection_name", "chunks")
    )
    url: str = field(default_factory=lambda: _get_default("vector_store", "url", ""))
    api_key: str = field(default_factory=lambda: _get_default("vector_store", "api_key", ""))


@dataclass
class IndexingConfig:
    """Configuration for the indexing process."""

    chunk_size: int = field(default_factory=lambda: _get_default("indexing", "chunk_size", 1000))
    chunk_overlap: int = field(
        default_factory=lambda: _get_default("indexing", "chunk_overlap", 200)
    )
    include_patterns: list[str] = field(
        default_factory=lambda: list(_get_default("indexing", "include_patterns", []) or [])
    )
    exclude_patterns: list[str] = field(
        default_factory=lambda: list(_get_default("indexing", "exclude_patterns", []) or [])
    )
    extraction_timeout: float = field(
        default_factory=lambda: _get_default("indexing", "extraction_timeout", 30.0)
    )
    max_file_size_mb: int = field(
        default_factory=lambda: _get_default("indexing", "max_file_size_mb", 50)
    )
    detect_mtime_changes: bool = field(
        default_factory=lambda: _get_default("indexing", "detect_mtime_changes", True)
    )
    store_dir_name: str = field(
        default_factory=lambda: _get_default("indexing", "store_dir_name", ".docindex")
    )


@dataclass
class SearchConfig:
    """Configuration for the search service."""

    default_limit: int = field(
        default_factory=lambda: _get_default("search", "default_limit", 10)
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default("logging", "format", "%(message)s")
    )


@dataclass
class DocIndexConfig:
    """Main configuration class for docindex."""

    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "DocIndexConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            DocIndexConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "DocIndexConfig":
        """Create DocIndexConfig from a dictionary."""
        config = cls()

        if "embedding" in data:
            config.embedding = EmbeddingConfig(**data["embedding"])
        if "vector_store" in data:
            config.vector_store = VectorStoreConfig(**data["vector_store"])
        if "indexing" in data:
            config.indexing = IndexingConfig(**data["indexing"])
        if "search" in data:
            config.search = SearchConfig(**data["search"])
        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        return config

    def apply_env_overrides(self) -> "DocIndexConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: DOCINDEX_<SECTION>_<KEY>
        Examples:
            - DOCINDEX_EMBEDDING_PROVIDER
            - DOCINDEX_EMBEDDING_API_KEY
            - DOCINDEX_VECTOR_STORE_URL
            - DOCINDEX_INDEXING_CHUNK_SIZE
            - DOCINDEX_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Embedding config
            "DOCINDEX_EMBEDDING_PROVIDER": ("embedding", "provider", str),
            "DOCINDEX_EMBEDDING_MODEL": ("embedding", "model", str),
            "DOCINDEX_EMBEDDING_API_URL": ("embedding", "api_url", str),
            "DOCINDEX_EMBEDDING_API_KEY": ("embedding", "api_key", str),
            "DOCINDEX_EMBEDDING_DIMENSION": ("embedding", "dimension", int),
            "DOCINDEX_EMBEDDING_BATCH_SIZE": ("embedding", "batch_size", int),
            "DOCINDEX_EMBEDDING_MAX_RETRIES": ("embedding", "max_retries", int),
            "DOCINDEX_EMBEDDING_TIMEOUT": ("embedding", "timeout", float),
            "DOCINDEX_EMBEDDING_FALLBACK_TO_ZERO_VECTOR": (
                "embedding", "fallback_to_zero_vector", _parse_bool
            ),
            # Vector store config
            "DOCINDEX_VECTOR_STORE_COLLECTION_NAME": ("vector_store", "collection_name", str),
            "DOCINDEX_VECTOR_STORE_URL": ("vector_store", "url", str),
            "DOCINDEX_VECTOR_STORE_API_KEY": ("vector_store", "api_key", str),
            # Indexing config
            "DOCINDEX_INDEXING_CHUNK_SIZE": ("indexing", "chunk_size", int),
            "DOCINDEX_INDEXING_CHUNK_OVERLAP": ("indexing", "chunk_overlap", int),
            "DOCINDEX_INDEXING_INCLUDE_PATTERNS": ("indexing", "include_patterns", _parse_list),
            "DOCINDEX_INDEXING_EXCLUDE_PATTERNS": ("indexing", "exclude_patterns", _parse_list),
            "DOCINDEX_INDEXING_EXTRACTION_TIMEOUT": ("indexing", "extraction_timeout", float),
            "DOCINDEX_INDEXING_MAX_FILE_SIZE_MB": ("indexing", "max_file_size_mb", int),
            "DOCINDEX_INDEXING_DETECT_MTIME_CHANGES": (
                "indexing", "detect_mtime_changes", _parse_bool
            ),
            # Search config
            "DOCINDEX_SEARCH_DEFAULT_LIMIT": ("search", "default_limit", int),
            # Logging config
            "DOCINDEX_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def validate(self) -> "DocIndexConfig":
        """
        Reject invalid or contradictory settings before any work begins.

        Raises:
            ConfigurationError: If a value is out of range or patterns conflict
        """
        indexing = self.indexing
        if indexing.chunk_size < 1:
            raise ConfigurationError(
                f"chunk_size must be at least 1, got {indexing.chunk_size}"
            )
        if indexing.chunk_overlap < 0:
            raise ConfigurationError(
                f"chunk_overlap must not be negative, got {indexing.chunk_overlap}"
            )
        if indexing.extraction_timeout <= 0:
            raise ConfigurationError(
                f"extraction_timeout must be positive, got {indexing.extraction_timeout}"
            )

        conflicting = sorted(set(indexing.include_patterns) & set(indexing.exclude_patterns))
        if conflicting:
            raise ConfigurationError(
                f"Patterns are both included and excluded: {', '.join(conflicting)}"
            )

        if self.embedding.provider not in ("local", "openai"):
            raise ConfigurationError(
                f"Unknown embedding provider: {self.embedding.provider!r} "
                f"(expected 'local' or 'openai')"
            )
        if self.embedding.dimension < 1:
            raise ConfigurationError(
                f"embedding dimension must be at least 1, got {self.embedding.dimension}"
            )
        if self.search.default_limit < 1:
            raise ConfigurationError(
                f"default_limit must be at least 1, got {self.search.default_limit}"
            )

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to a list of non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> DocIndexConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        DocIndexConfig instance
    """
    if config_path:
        config = DocIndexConfig.from_file(config_path)
    else:
        config = DocIndexConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
