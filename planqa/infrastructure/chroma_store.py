# planqa/infrastructure/chroma_store.py

from typing import List, Optional, Tuple
from pathlib import Path

import numpy as np
import chromadb
from chromadb.config import Settings

from planqa.domain.interfaces import ChunkStorePort
from planqa.domain.models import Chunk


# ── Constants ─────────────────────────────────────────────────────────────────

MODEL_FINGERPRINT_KEY = "embedding_model_name"
COLLECTION_NAME       = "document_chunks"
METADATA_SENTINEL_ID  = "__metadata__"
UPSERT_BATCH_SIZE     = 500


class ChromaChunkStore(ChunkStorePort):
    """
    Persistent chunk store on ChromaDB.

    Chroma is used purely as durable storage for chunk text, metadata and
    vectors. Ranking never goes through Chroma's ANN index: list_chunks()
    returns every chunk of a document and the HybridRanker scores them all.

    Persistence features:
        - Model fingerprinting: vectors written by another embedding model
          are wiped before new chunks are stored (dimensions must match)
        - Idempotent upserts: re-adding the same chunk_id never duplicates
        - Document order: chunks come back ordered by (page, chunk index)
    """

    def __init__(self, persist_directory: str, embedding_model_name: str):
        """
        Args:
            persist_directory:    Path for ChromaDB on-disk storage.
            embedding_model_name: Current embedding model identifier.
                                  Used to detect stale stored vectors.
        """
        self._persist_directory    = persist_directory
        self._embedding_model_name = embedding_model_name

        path = Path(persist_directory)
        if path.exists() and not path.is_dir():
            raise RuntimeError(f"Failed to initialize ChromaDB: path '{persist_directory}' is a file.")
        path.mkdir(parents=True, exist_ok=True)

        try:
            self._client = chromadb.PersistentClient(
                path=persist_directory,
                settings=Settings(anonymized_telemetry=False),
            )
            self._collection = self._get_or_create_collection()
        except Exception as error:
            raise RuntimeError(
                f"Failed to initialize ChromaDB at '{persist_directory}'.\n"
                f"The database may be locked by another process or corrupted.\n"
                f"Fix: close other running instances, or delete '{persist_directory}'.\n"
                f"Original error: {error}"
            ) from error

        print(
            f"[ChromaStore] Connected to '{persist_directory}'. "
            f"Collection has {self._real_chunk_count()} chunks."
        )

    # ─── ChunkStorePort ───────────────────────────────────────────────────────

    def is_ready(self) -> bool:
        """
        True only when the store holds chunks AND they were embedded with
        the current model.
        """
        if self._real_chunk_count() == 0:
            return False

        stored_model = self._get_metadata_value(MODEL_FINGERPRINT_KEY)
        if stored_model != self._embedding_model_name:
            print(
                f"[ChromaStore] ⚠ Model mismatch detected!\n"
                f"  Stored : '{stored_model}'\n"
                f"  Current: '{self._embedding_model_name}'\n"
                f"  → Full reindex required."
            )
            return False

        return True

    def add_chunks(self, chunks: List[Chunk]) -> None:
        if not chunks:
            raise ValueError("Cannot add an empty chunk list.")

        # The sentinel outlives deleted documents and pins the old dimension
        stored_model = self._get_metadata_value(MODEL_FINGERPRINT_KEY)
        if stored_model and stored_model != self._embedding_model_name:
            print("[ChromaStore] Clearing stale collection before reindex...")
            self._client.delete_collection(COLLECTION_NAME)
            self._collection = self._get_or_create_collection()

        print(f"[ChromaStore] Upserting {len(chunks)} chunks...")

        ids        = [c.chunk_id        for c in chunks]
        embeddings = [c.vector.tolist() for c in chunks]
        documents  = [c.text            for c in chunks]
        metadatas  = [{
            "document_id": c.document_id,
            "page_number": c.page_number,
            "sequence_id": c.sequence_id,
        } for c in chunks]

        for start in range(0, len(chunks), UPSERT_BATCH_SIZE):
            self._collection.upsert(
                ids        = ids       [start : start + UPSERT_BATCH_SIZE],
                embeddings = embeddings[start : start + UPSERT_BATCH_SIZE],
                documents  = documents [start : start + UPSERT_BATCH_SIZE],
                metadatas  = metadatas [start : start + UPSERT_BATCH_SIZE],
            )

        self._save_model_fingerprint(dimension=len(chunks[0].vector))

        print(
            f"[ChromaStore] ✓ Upserted {len(chunks)} chunks. "
            f"Total in store: {self._real_chunk_count()}"
        )

    def list_chunks(self, document_id: str) -> Tuple[Chunk, ...]:
        results = self._collection.get(
            where   = {"document_id": document_id},
            include = ["documents", "metadatas", "embeddings"],
        )

        embeddings = results["embeddings"] if results["embeddings"] is not None else []
        chunks = [
            Chunk(
                chunk_id    = chunk_id,
                document_id = metadata["document_id"],
                page_number = metadata["page_number"],
                sequence_id = metadata["sequence_id"],
                text        = text,
                vector      = np.asarray(embedding, dtype=np.float64),
            )
            for chunk_id, text, metadata, embedding in zip(
                results["ids"],
                results["documents"],
                results["metadatas"],
                embeddings,
            )
        ]
        return tuple(sorted(chunks, key=_document_order))

    def has_document(self, document_id: str) -> bool:
        results = self._collection.get(where={"document_id": document_id}, limit=1)
        return len(results["ids"]) > 0

    def delete_document(self, document_id: str) -> None:
        """Remove every chunk owned by a document."""
        self._collection.delete(where={"document_id": document_id})
        print(f"[ChromaStore] Deleted document '{document_id}'.")

    def get_document_stats(self) -> List[dict]:
        """
        Aggregate chunk counts per document.
        Excludes the sentinel document.
        """
        results = self._collection.get(
            include = ["metadatas"],
            where   = {"document_id": {"$ne": METADATA_SENTINEL_ID}},
        )

        counts = {}
        for meta in results["metadatas"]:
            document_id = meta.get("document_id", "unknown")
            counts[document_id] = counts.get(document_id, 0) + 1

        return [
            {"document_id": document_id, "count": count}
            for document_id, count in sorted(counts.items())
        ]

    # ─── Private: ChromaDB Helpers ────────────────────────────────────────────

    def _get_or_create_collection(self):
        return self._client.get_or_create_collection(
            name=COLLECTION_NAME,
            metadata={"hnsw:space": "cosine"},
        )

    def _save_model_fingerprint(self, dimension: int) -> None:
        """Persist the embedding model name as a sentinel record."""
        # Any non-zero vector of the collection's dimension will do
        placeholder = [0.0] * dimension
        placeholder[0] = 1.0

        self._collection.upsert(
            ids        = [METADATA_SENTINEL_ID],
            embeddings = [placeholder],
            documents  = [METADATA_SENTINEL_ID],
            metadatas  = [{
                "document_id":         METADATA_SENTINEL_ID,
                MODEL_FINGERPRINT_KEY: self._embedding_model_name,
            }],
        )

    def _real_chunk_count(self) -> int:
        """
        Chunk count excluding the metadata sentinel.
        ChromaDB's .count() includes the sentinel, which skews display values.
        """
        total = self._collection.count()
        return max(0, total - 1) if self._sentinel_exists() else total

    def _sentinel_exists(self) -> bool:
        result = self._collection.get(ids=[METADATA_SENTINEL_ID])
        return len(result["ids"]) > 0

    def _get_metadata_value(self, key: str) -> Optional[str]:
        """Retrieve a single value from the sentinel document's metadata."""
        result = self._collection.get(
            ids     = [METADATA_SENTINEL_ID],
            include = ["metadatas"],
        )
        if result["metadatas"]:
            return result["metadatas"][0].get(key)
        return None


def _document_order(chunk: Chunk) -> Tuple[int, int]:
    _, _, index = chunk.sequence_id.rpartition("-")
    return chunk.page_number, int(index)
