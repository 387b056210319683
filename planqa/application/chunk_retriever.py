# planqa/application/chunk_retriever.py

from typing import List
import numpy as np

from planqa.domain.interfaces import ChunkRetrieverPort, ChunkStorePort
from planqa.domain.models import Chunk
from planqa.infrastructure.hybrid_ranker import HybridRanker


class ChunkRetriever(ChunkRetrieverPort):
    """
    Binds the ranker to a chunk store.

    Each search fetches a fresh snapshot of one document's chunks, so two
    queries against different documents never see each other's chunks.
    """

    def __init__(self, chunk_store: ChunkStorePort, ranker: HybridRanker):
        self._chunk_store = chunk_store
        self._ranker = ranker

    def search_similar(
        self,
        document_id: str,
        query_vector: np.ndarray,
        top_k: int = 5,
    ) -> List[Chunk]:
        chunks = self._chunk_store.list_chunks(document_id)
        return self._ranker.rank_by_similarity(chunks, query_vector, top_k)

    def search_by_keywords(
        self,
        document_id: str,
        query_text: str,
        top_k: int = 5,
    ) -> List[Chunk]:
        chunks = self._chunk_store.list_chunks(document_id)
        return self._ranker.rank_by_keywords(chunks, query_text, top_k)

    def search_hybrid(
        self,
        document_id: str,
        query_vector: np.ndarray,
        query_text: str,
        top_k: int = 10,
        semantic_weight: float = 0.5,
    ) -> List[Chunk]:
        chunks = self._chunk_store.list_chunks(document_id)
        return self._ranker.rank(chunks, query_vector, query_text, top_k, semantic_weight)
