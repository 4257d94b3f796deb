"""
Service Layer - IndexingService, SearchService and ServicesContainer.
"""

from docindex.services.container import (
    ServicesContainer,
    create_services,
    remove_index,
    resolve_store_dir,
)
from docindex.services.indexing_models import IndexingError, IndexingResult
from docindex.services.indexing_service import IndexingService
from docindex.services.search_service import IndexStats, SearchService

__all__ = [
    # Container and factory
    "ServicesContainer",
    "create_services",
    "resolve_store_dir",
    "remove_index",
    # Services
    "IndexingService",
    "IndexingResult",
    "IndexingError",
    "SearchService",
    "IndexStats",
]
