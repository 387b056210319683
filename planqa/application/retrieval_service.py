# planqa/application/retrieval_service.py

import uuid
from typing import List, Optional

from planqa.domain.interfaces import ChunkRetrieverPort, ChunkStorePort, EmbeddingPort
from planqa.domain.models import Chunk, Page, PageSegment, Query, RetrievedPassage
from planqa.infrastructure.page_chunker import PageChunker


DEFAULT_TOP_K = 5
DEFAULT_SEMANTIC_WEIGHT = 0.5


class DocumentRetrievalService:
    """
    Core use case: index a document's pages, then retrieve the chunks most
    relevant to a question for the answer-generation step.

    The service never decides whether an answer is confident enough:
    an empty result is returned as-is and the caller words the reply.
    """

    def __init__(
        self,
        embedding_engine: EmbeddingPort,
        chunk_store: ChunkStorePort,
        retriever: ChunkRetrieverPort,
        chunker: Optional[PageChunker] = None,
        top_k: int = DEFAULT_TOP_K,
        semantic_weight: float = DEFAULT_SEMANTIC_WEIGHT,
    ):
        self._embedding_engine = embedding_engine
        self._chunk_store = chunk_store
        self._retriever = retriever
        self._chunker = chunker or PageChunker()
        self._top_k = top_k
        self._semantic_weight = semantic_weight

    def index_document(self, document_id: str, pages: List[Page]) -> int:
        """Chunk every page, encode all chunks in one batch, store them."""
        if not pages:
            raise ValueError(f"Document '{document_id}' has no pages — nothing to index.")

        segments: List[PageSegment] = []
        for page in pages:
            segments.extend(self._chunker.chunk(page.text, page.page_number))

        if not segments:
            raise ValueError(f"Document '{document_id}' has no text — nothing to index.")

        print(f"[RetrievalService] Encoding {len(segments)} chunks from {len(pages)} pages...")
        vectors = self._embedding_engine.encode([s.text for s in segments])

        chunks = [
            Chunk.from_segment(
                segment,
                chunk_id=str(uuid.uuid4()),
                document_id=document_id,
                vector=vector,
            )
            for segment, vector in zip(segments, vectors)
        ]
        self._chunk_store.add_chunks(chunks)
        print(f"[RetrievalService] Indexed '{document_id}'.")
        return len(chunks)

    def retrieve(
        self,
        document_id: str,
        question: str,
        top_k: Optional[int] = None,
    ) -> List[Chunk]:
        question = question.strip()
        if not question:
            raise ValueError("Question cannot be empty.")

        query = Query(text=question, vector=self._embedding_engine.encode_single(question))
        return self._retriever.search_hybrid(
            document_id,
            query.vector,
            query.text,
            top_k if top_k is not None else self._top_k,
            self._semantic_weight,
        )

    def retrieve_passages(
        self,
        document_id: str,
        question: str,
        top_k: Optional[int] = None,
        max_chars: Optional[int] = None,
    ) -> List[RetrievedPassage]:
        """
        Ranked chunks shaped for the generation step.
        max_chars truncates each passage (the chat flow sends 300-char snippets).
        """
        return [
            RetrievedPassage(
                text=chunk.text if max_chars is None else chunk.text[:max_chars],
                page_number=chunk.page_number,
            )
            for chunk in self.retrieve(document_id, question, top_k)
        ]

    def delete_document(self, document_id: str) -> None:
        """Dropping a document drops all of its chunks."""
        self._chunk_store.delete_document(document_id)
