# tests/test_fallback_retriever.py

import numpy as np
from unittest.mock import MagicMock

from planqa.domain.models import Chunk
from planqa.application.chunk_retriever import ChunkRetriever
from planqa.application.fallback_retriever import FallbackRetriever, merge_by_identity
from planqa.infrastructure.chunk_store import InMemoryChunkStore
from planqa.infrastructure.hybrid_ranker import HybridRanker


def _make_chunk(chunk_id: str, text: str = "text", document_id: str = "plan.pdf") -> Chunk:
    return Chunk(
        chunk_id=chunk_id,
        document_id=document_id,
        page_number=1,
        sequence_id=f"1-{chunk_id}",
        text=text,
        vector=np.array([1.0, 0.0]),
    )


def _ids(chunks) -> list:
    return [c.chunk_id for c in chunks]


def test_enough_hybrid_results_skip_keyword_pass():
    inner = MagicMock()
    inner.search_hybrid.return_value = [_make_chunk(f"h{i}") for i in range(5)]

    results = FallbackRetriever(inner).search_hybrid("plan.pdf", np.array([1.0, 0.0]), "copay", 10, 0.5)

    assert len(results) == 5
    inner.search_by_keywords.assert_not_called()


def test_thin_hybrid_results_are_merged_with_keyword_results():
    inner = MagicMock()
    inner.search_hybrid.return_value = [_make_chunk("a"), _make_chunk("b")]
    inner.search_by_keywords.return_value = [_make_chunk("b"), _make_chunk("c"), _make_chunk("d")]

    results = FallbackRetriever(inner).search_hybrid("plan.pdf", np.array([1.0, 0.0]), "copay", 10, 0.5)

    assert _ids(results) == ["a", "b", "c", "d"]
    inner.search_by_keywords.assert_called_once_with("plan.pdf", "copay", 10)


def test_merged_results_are_capped_at_top_k():
    inner = MagicMock()
    inner.search_hybrid.return_value = [_make_chunk("a")]
    inner.search_by_keywords.return_value = [_make_chunk(x) for x in "bcdef"]

    results = FallbackRetriever(inner).search_hybrid("plan.pdf", np.array([1.0, 0.0]), "copay", 3, 0.5)

    assert _ids(results) == ["a", "b", "c"]


def test_single_family_searches_pass_through():
    inner = MagicMock()
    inner.search_similar.return_value = [_make_chunk("s")]
    inner.search_by_keywords.return_value = [_make_chunk("k")]
    retriever = FallbackRetriever(inner)
    query_vector = np.array([1.0, 0.0])

    assert _ids(retriever.search_similar("plan.pdf", query_vector, 5)) == ["s"]
    assert _ids(retriever.search_by_keywords("plan.pdf", "copay", 5)) == ["k"]
    inner.search_similar.assert_called_once_with("plan.pdf", query_vector, 5)


def test_merge_by_identity_keeps_primary_order():
    primary = [_make_chunk("x"), _make_chunk("y")]
    secondary = [_make_chunk("y"), _make_chunk("x"), _make_chunk("z")]
    assert _ids(merge_by_identity(primary, secondary, 10)) == ["x", "y", "z"]


def test_retriever_reads_only_the_requested_document():
    store = InMemoryChunkStore()
    store.add_chunks([
        _make_chunk("a1", "Specialist copay is $40.", document_id="doc_a"),
        _make_chunk("b1", "Specialist copay is $60.", document_id="doc_b"),
    ])
    retriever = ChunkRetriever(store, HybridRanker())

    hybrid = retriever.search_hybrid("doc_a", np.array([1.0, 0.0]), "specialist copay", 10, 0.5)
    keywords = retriever.search_by_keywords("doc_b", "specialist copay", 10)
    similar = retriever.search_similar("doc_a", np.array([1.0, 0.0]), 10)

    assert _ids(hybrid) == ["a1"]
    assert _ids(keywords) == ["b1"]
    assert _ids(similar) == ["a1"]


def test_empty_document_returns_empty_everywhere():
    retriever = FallbackRetriever(ChunkRetriever(InMemoryChunkStore(), HybridRanker()))

    assert retriever.search_hybrid("missing", np.array([1.0, 0.0]), "copay", 10, 0.5) == []
    assert retriever.search_similar("missing", np.array([1.0, 0.0]), 5) == []
    assert retriever.search_by_keywords("missing", "copay", 5) == []
