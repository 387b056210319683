# main.py

import os
import sys

from planqa.infrastructure.page_loader import PageLoader
from planqa.infrastructure.hash_embedding import HashEmbeddingEngine
from planqa.infrastructure.chroma_store import ChromaChunkStore
from planqa.infrastructure.hybrid_ranker import HybridRanker
from planqa.application.chunk_retriever import ChunkRetriever
from planqa.application.fallback_retriever import FallbackRetriever
from planqa.application.retrieval_service import DocumentRetrievalService
from planqa.interface.cli import (
    display_welcome_banner,
    display_indexing_status,
    prompt_for_document,
    prompt_for_query,
    display_results,
    display_error,
    ask_continue,
)


DATA_DIRECTORY = "data"
CHROMA_PERSIST_DIRECTORY = "./data/chroma_db"
TOP_K_RESULTS = 5
SEMANTIC_WEIGHT = 0.5

# "true" swaps the sentence-transformers model for deterministic hash vectors
MOCK_EMBEDDINGS = os.environ.get("PLANQA_MOCK_EMBEDDINGS", "false").lower() == "true"
VERBOSE_RANKING = os.environ.get("PLANQA_VERBOSE", "false").lower() == "true"


def main() -> None:
    display_welcome_banner()

    # ── 1. Initialize infrastructure ─────────────────────────────────────────
    if MOCK_EMBEDDINGS:
        print("[Main] Using deterministic mock embeddings.")
        embedding_engine = HashEmbeddingEngine()
    else:
        from planqa.infrastructure.embedding_engine import SentenceTransformerEngine
        embedding_engine = SentenceTransformerEngine()

    try:
        chunk_store = ChromaChunkStore(
            persist_directory=CHROMA_PERSIST_DIRECTORY,
            embedding_model_name=embedding_engine.model_name,
        )
    except RuntimeError as error:
        display_error(str(error))
        sys.exit(1)

    retriever = FallbackRetriever(
        ChunkRetriever(chunk_store, HybridRanker(SEMANTIC_WEIGHT, verbose=VERBOSE_RANKING))
    )
    service = DocumentRetrievalService(
        embedding_engine=embedding_engine,
        chunk_store=chunk_store,
        retriever=retriever,
        top_k=TOP_K_RESULTS,
        semantic_weight=SEMANTIC_WEIGHT,
    )

    # ── 2. Index documents not yet in the store ──────────────────────────────
    try:
        documents = PageLoader().load_directory(DATA_DIRECTORY, exclude=[CHROMA_PERSIST_DIRECTORY])
    except FileNotFoundError as error:
        display_error(str(error))
        sys.exit(1)

    if not documents:
        display_error(f"No supported documents found in '{DATA_DIRECTORY}/'.")
        sys.exit(1)

    # A model change invalidates every stored vector
    reindex_all = not chunk_store.is_ready()
    for document_id, pages in documents.items():
        if reindex_all or not chunk_store.has_document(document_id):
            if chunk_store.has_document(document_id):
                service.delete_document(document_id)
            service.index_document(document_id, pages)
        else:
            print(f"[Main] '{document_id}' already indexed — skipping. ✓")

    display_indexing_status(chunk_store.get_document_stats())

    # ── 3. Interactive question loop ─────────────────────────────────────────
    document_ids = sorted(documents)
    while True:
        document_id = prompt_for_document(document_ids)
        query = prompt_for_query()
        try:
            results = service.retrieve(document_id, query)
            display_results(query, results)
        except ValueError as error:
            display_error(str(error))

        if not ask_continue():
            break


if __name__ == "__main__":
    main()
