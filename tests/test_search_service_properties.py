"""
Property-based tests for SearchService.

Covers filter correctness, distance ordering and argument validation over
the in-memory store.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from docindex.infrastructure.fakes import InMemoryVectorStore, LocalEmbeddingClient
from docindex.infrastructure.vector_store import (
    ChunkRecord,
    DimensionMismatchError,
    SearchFilters,
)
from docindex.services.search_service import SearchService
from tests.indexing_test_utils import DIMENSION, create_index_env, run_async, write_file

LIBRARIES = ["react", "vue", "svelte"]
TOPICS = [None, "hooks", "routing"]
DIFFICULTIES = [None, "beginner", "advanced"]


@st.composite
def record_strategy(draw, index: int):
    client = LocalEmbeddingClient(dimension=DIMENSION)
    text = draw(st.text(min_size=1, max_size=40))
    library_id = draw(st.sampled_from(LIBRARIES))
    relative_path = f"{library_id}/doc{index}.md"
    return ChunkRecord(
        id=f"{relative_path}::0",
        library_id=library_id,
        topic_name=draw(st.sampled_from(TOPICS)),
        original_file_path=relative_path,
        text=text,
        order=0,
        vector=client.vector_for(text),
        difficulty=draw(st.sampled_from(DIFFICULTIES)),
    )


@st.composite
def records_strategy(draw):
    count = draw(st.integers(min_value=0, max_value=12))
    return [draw(record_strategy(i)) for i in range(count)]


filters_strategy = st.builds(
    SearchFilters,
    library_id=st.sampled_from([None] + LIBRARIES),
    difficulty=st.sampled_from(DIFFICULTIES),
    topic_name=st.sampled_from(TOPICS),
)


def _service(records: list[ChunkRecord]) -> SearchService:
    store = InMemoryVectorStore(vector_size=DIMENSION)
    run_async(store.insert(records))
    return SearchService(LocalEmbeddingClient(dimension=DIMENSION), store)


@settings(max_examples=50, deadline=None)
@given(records=records_strategy(), filters=filters_strategy, limit=st.integers(1, 20))
def test_filtered_search_returns_only_matching_rows(records, filters, limit):
    service = _service(records)

    results = run_async(service.search("how do hooks work", limit=limit, filters=filters))

    expected_ids = {r.id for r in records if filters.matches(r.to_payload())}
    assert len(results) == min(limit, len(expected_ids))
    for result in results:
        assert result.chunk_id in expected_ids
        for key, value in filters.as_dict().items():
            if key == "difficulty":
                assert result.metadata["difficulty"] == value
            else:
                assert getattr(result, key) == value


@settings(max_examples=50, deadline=None)
@given(records=records_strategy(), limit=st.integers(1, 20))
def test_results_ordered_by_distance(records, limit):
    service = _service(records)

    results = run_async(service.search("state management", limit=limit))

    distances = [r.distance for r in results]
    assert distances == sorted(distances)
    for result in results:
        assert result.relevance == pytest.approx(1.0 - result.distance)


def test_exact_text_is_nearest(tmp_path):
    env = create_index_env(tmp_path)
    write_file(env.root, "react/hooks/state.md", "useState stores local state.")
    write_file(env.root, "vue/guide/reactivity.md", "ref() creates reactive values.")
    write_file(env.root, "svelte/stores.md", "Stores hold shared state.")
    env.sync()

    results = run_async(env.search_service.search("ref() creates reactive values."))

    assert results[0].original_file_path == "vue/guide/reactivity.md"
    assert results[0].distance == pytest.approx(0.0, abs=1e-9)
    assert results[0].relevance == pytest.approx(1.0)
    assert results[0].topic_name == "guide"


def test_default_limit(tmp_path):
    env = create_index_env(tmp_path)
    for i in range(12):
        write_file(env.root, f"lib/doc{i}.md", f"Document number {i}.")
    env.sync()

    assert len(run_async(env.search_service.search("document"))) == 10
    assert len(run_async(env.search_service.search("document", limit=3))) == 3


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_rejected(limit):
    with pytest.raises(ValueError):
        run_async(_service([]).search("query", limit=limit))


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_rejected(query):
    with pytest.raises(ValueError):
        run_async(_service([]).search(query))


def test_query_dimension_mismatch():
    store = InMemoryVectorStore(vector_size=DIMENSION)
    service = SearchService(LocalEmbeddingClient(dimension=DIMENSION + 1), store)
    with pytest.raises(DimensionMismatchError):
        run_async(service.search("query"))


def test_get_stats(tmp_path):
    env = create_index_env(tmp_path)
    write_file(env.root, "react/hooks/state.md", "useState stores local state.")
    write_file(env.root, "react/hooks/effect.md", "useEffect runs side effects.")
    write_file(env.root, "vue/intro.md", "Vue is progressive.")
    env.sync()

    stats = run_async(env.search_service.get_stats())

    assert stats.total_chunks == 3
    assert stats.libraries == ["react", "vue"]
    assert stats.topics == ["hooks"]
    assert stats.unique_libraries == 2
    assert stats.unique_topics == 1
    assert stats.indexed_files == 3
    assert stats.last_updated is not None


def test_get_stats_empty():
    stats = run_async(_service([]).get_stats())
    assert stats.total_chunks == 0
    assert stats.libraries == []
    assert stats.last_updated is None
