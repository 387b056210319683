# planqa/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List, Sequence
import numpy as np

from .models import Chunk


class EmbeddingPort(ABC):
    """
    Port for any embedding engine.
    Intentionally minimal: model naming stays on the concrete engines.
    """

    @abstractmethod
    def encode(self, texts: List[str]) -> np.ndarray: ...

    @abstractmethod
    def encode_single(self, text: str) -> np.ndarray: ...


class ChunkStorePort(ABC):

    @abstractmethod
    def add_chunks(self, chunks: List[Chunk]) -> None: ...

    @abstractmethod
    def list_chunks(self, document_id: str) -> Sequence[Chunk]:
        """
        Return every chunk of one document, vectors populated.
        The returned collection is a snapshot: later writes to the store
        never show up in it.
        """
        ...

    @abstractmethod
    def has_document(self, document_id: str) -> bool: ...

    @abstractmethod
    def delete_document(self, document_id: str) -> None: ...

    @abstractmethod
    def get_document_stats(self) -> List[dict]:
        """
        Return a list of stored documents with their chunk counts.
        """
        ...


class ChunkRetrieverPort(ABC):
    """
    The three ranking entry points, bound to a chunk store.
    Every method returns at most top_k chunks, best first.
    """

    @abstractmethod
    def search_similar(
        self,
        document_id: str,
        query_vector: np.ndarray,
        top_k: int,
    ) -> List[Chunk]: ...

    @abstractmethod
    def search_by_keywords(
        self,
        document_id: str,
        query_text: str,
        top_k: int,
    ) -> List[Chunk]: ...

    @abstractmethod
    def search_hybrid(
        self,
        document_id: str,
        query_vector: np.ndarray,
        query_text: str,
        top_k: int,
        semantic_weight: float,
    ) -> List[Chunk]: ...
