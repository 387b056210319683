# planqa/application/fallback_retriever.py

from typing import List
import numpy as np

from planqa.domain.interfaces import ChunkRetrieverPort
from planqa.domain.models import Chunk


MIN_HYBRID_RESULTS = 5


class FallbackRetriever(ChunkRetrieverPort):
    """
    Decorator over any ChunkRetrieverPort.

    search_similar and search_by_keywords pass straight through. When
    search_hybrid comes back thin (fewer than min_results chunks), a
    keyword-only pass is run and its chunks are appended after the hybrid
    ones, skipping chunks already present, up to top_k.
    """

    def __init__(self, retriever: ChunkRetrieverPort, min_results: int = MIN_HYBRID_RESULTS):
        self._retriever = retriever
        self._min_results = min_results

    def search_similar(
        self,
        document_id: str,
        query_vector: np.ndarray,
        top_k: int = 5,
    ) -> List[Chunk]:
        return self._retriever.search_similar(document_id, query_vector, top_k)

    def search_by_keywords(
        self,
        document_id: str,
        query_text: str,
        top_k: int = 5,
    ) -> List[Chunk]:
        return self._retriever.search_by_keywords(document_id, query_text, top_k)

    def search_hybrid(
        self,
        document_id: str,
        query_vector: np.ndarray,
        query_text: str,
        top_k: int = 10,
        semantic_weight: float = 0.5,
    ) -> List[Chunk]:
        results = self._retriever.search_hybrid(
            document_id, query_vector, query_text, top_k, semantic_weight
        )
        if len(results) >= self._min_results:
            return results

        print(f"[FallbackRetriever] Hybrid search returned {len(results)} chunks, "
              f"adding keyword-only results...")
        keyword_results = self._retriever.search_by_keywords(document_id, query_text, top_k)
        return merge_by_identity(results, keyword_results, top_k)


def merge_by_identity(primary: List[Chunk], secondary: List[Chunk], limit: int) -> List[Chunk]:
    """Union of two rankings keyed on chunk_id; primary order wins."""
    merged = {chunk.chunk_id: chunk for chunk in primary}
    for chunk in secondary:
        merged.setdefault(chunk.chunk_id, chunk)
    return list(merged.values())[:max(limit, 0)]
