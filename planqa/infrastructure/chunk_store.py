# planqa/infrastructure/chunk_store.py

from typing import Dict, List, Tuple

from planqa.domain.interfaces import ChunkStorePort
from planqa.domain.models import Chunk


class InMemoryChunkStore(ChunkStorePort):
    """
    Chunks grouped by document, kept in insertion order.

    list_chunks() hands out a tuple, so callers always rank an immutable
    snapshot of exactly one document.
    """

    def __init__(self):
        self._chunks_by_document: Dict[str, Dict[str, Chunk]] = {}

    def add_chunks(self, chunks: List[Chunk]) -> None:
        if not chunks:
            raise ValueError("Cannot add an empty chunk list.")

        for chunk in chunks:
            document_chunks = self._chunks_by_document.setdefault(chunk.document_id, {})
            _check_dimension(document_chunks, chunk)
            # Re-adding a chunk_id replaces it in place (upsert)
            document_chunks[chunk.chunk_id] = chunk

        print(f"[ChunkStore] Stored {len(chunks)} chunks. "
              f"Documents in store: {len(self._chunks_by_document)}")

    def list_chunks(self, document_id: str) -> Tuple[Chunk, ...]:
        return tuple(self._chunks_by_document.get(document_id, {}).values())

    def has_document(self, document_id: str) -> bool:
        return bool(self._chunks_by_document.get(document_id))

    def delete_document(self, document_id: str) -> None:
        removed = self._chunks_by_document.pop(document_id, {})
        print(f"[ChunkStore] Deleted document '{document_id}' ({len(removed)} chunks).")

    def get_document_stats(self) -> List[dict]:
        return [
            {"document_id": document_id, "count": len(chunks)}
            for document_id, chunks in sorted(self._chunks_by_document.items())
        ]


def _check_dimension(document_chunks: Dict[str, Chunk], chunk: Chunk) -> None:
    if not document_chunks:
        return
    expected = len(next(iter(document_chunks.values())).vector)
    if len(chunk.vector) != expected:
        raise ValueError(
            f"Chunk '{chunk.chunk_id}' has a {len(chunk.vector)}-dimensional vector; "
            f"document '{chunk.document_id}' uses {expected} dimensions."
        )
