# planqa/domain/models.py

from dataclasses import dataclass, field
import numpy as np


@dataclass(frozen=True)
class Page:
    """A single page of extracted document text (page numbers start at 1)."""
    page_number: int
    text: str


@dataclass(frozen=True)
class PageSegment:
    """
    Chunker output: a trimmed slice of one page, not yet embedded.
    sequence_id has the form "<page_number>-<index>".
    """
    text: str
    page_number: int
    sequence_id: str


@dataclass(frozen=True)
class Chunk:
    """
    The atomic unit of retrieval: a page segment plus its embedding vector.
    The vector is stored as a read-only float array so a chunk can be shared
    between concurrent ranking calls.
    """
    chunk_id: str
    document_id: str
    page_number: int
    sequence_id: str
    text: str
    vector: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.vector is None:
            raise ValueError(f"Chunk '{self.chunk_id}' has no vector.")
        vector = np.array(self.vector, dtype=np.float64)
        if vector.ndim != 1 or vector.size == 0:
            raise ValueError(
                f"Chunk '{self.chunk_id}' needs a non-empty 1-D vector, got shape {vector.shape}."
            )
        vector.setflags(write=False)
        object.__setattr__(self, "vector", vector)

    @classmethod
    def from_segment(
        cls,
        segment: PageSegment,
        chunk_id: str,
        document_id: str,
        vector: np.ndarray,
    ) -> "Chunk":
        return cls(
            chunk_id=chunk_id,
            document_id=document_id,
            page_number=segment.page_number,
            sequence_id=segment.sequence_id,
            text=segment.text,
            vector=vector,
        )


@dataclass(frozen=True)
class Query:
    """Raw question text plus its externally computed embedding."""
    text: str
    vector: np.ndarray = field(repr=False, compare=False)


@dataclass(frozen=True)
class ScoredChunk:
    """
    Per-call ranking record. semantic_score and lexical_score are already
    normalized to [0, 1] against the other chunks of the same call.
    """
    chunk: Chunk
    semantic_score: float
    lexical_score: float
    fused_score: float

    def __repr__(self) -> str:
        preview = self.chunk.text[:80].replace("\n", " ")
        return (
            f"ScoredChunk(fused={self.fused_score:.4f}, "
            f"sem={self.semantic_score:.4f}, kw={self.lexical_score:.4f}, "
            f"page={self.chunk.page_number}, preview='{preview}...')"
        )


@dataclass(frozen=True)
class RetrievedPassage:
    """What the answer-generation collaborator receives for each ranked chunk."""
    text: str
    page_number: int
