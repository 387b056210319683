# planqa/infrastructure/hybrid_ranker.py

from typing import List, Optional, Sequence, Tuple
import numpy as np

from planqa.domain.models import Chunk, ScoredChunk
from planqa.infrastructure.lexical_scorer import LexicalQuery, score_text
from planqa.infrastructure.vector_scorer import cosine_similarity


DEFAULT_SEMANTIC_WEIGHT = 0.5
DEFAULT_TOP_K = 10

# Floor for the per-family max so all-zero score families stay at zero
NORMALIZATION_EPSILON = 0.001

# Adaptive fusion: a chunk whose normalized keyword score beats this
# threshold gets its keyword weight boosted and its semantic weight shrunk.
KEYWORD_BOOST_THRESHOLD = 0.5
KEYWORD_BOOST_FACTOR = 1.5
SEMANTIC_SHRINK_FACTOR = 0.7

DIAGNOSTIC_ROWS = 5
SNIPPET_CHARS = 150


class HybridRanker:
    """
    Ranks one document's chunks against a query by fusing:
    - Semantic score (cosine similarity between query and chunk vectors)
    - Lexical score (exact/partial term hits, synonyms, phrase bonuses)

    Each family is divided by its own max for the call, so both land in
    [0, 1] regardless of corpus. Fused score is a weighted average:

        fused = (w_sem * semantic + w_kw * lexical) / (w_sem + w_kw)

    where w_kw = 1 - w_sem, adjusted per chunk when the lexical score is
    strong (> 0.5): w_kw * 1.5 and w_sem * 0.7.

    The ranker holds no per-query state; it is safe to share between
    threads as long as every call gets its own chunk collection.
    """

    def __init__(
        self,
        semantic_weight: float = DEFAULT_SEMANTIC_WEIGHT,
        verbose: bool = False,
    ):
        """
        Args:
            semantic_weight: Default weight for the semantic family (0-1).
                             1 - semantic_weight goes to keywords.
            verbose:         Print a score breakdown of the top results
                             for every hybrid call.
        """
        self._semantic_weight = _validate_weight(semantic_weight)
        self._verbose = verbose

    @property
    def semantic_weight(self) -> float:
        return self._semantic_weight

    # ─── Hybrid ───────────────────────────────────────────────────────────────

    def score(
        self,
        chunks: Sequence[Chunk],
        query_vector: np.ndarray,
        query_text: str,
        semantic_weight: Optional[float] = None,
    ) -> List[ScoredChunk]:
        """
        Score every chunk and return them all, best first.
        Ties keep the input order.
        """
        if not chunks:
            return []

        weight = self._semantic_weight if semantic_weight is None else _validate_weight(semantic_weight)
        lexical_query = LexicalQuery.from_text(query_text)

        # Negative cosine means "unrelated", not "less than nothing"
        semantic_raw = np.array([
            max(0.0, cosine_similarity(query_vector, chunk.vector)) for chunk in chunks
        ])
        lexical_raw = np.array([score_text(chunk.text, lexical_query) for chunk in chunks])

        semantic_norm = _normalize_by_max(semantic_raw)
        lexical_norm = _normalize_by_max(lexical_raw)

        scored = []
        for chunk, semantic, lexical in zip(chunks, semantic_norm, lexical_norm):
            sem_weight, kw_weight = fusion_weights(float(lexical), weight)
            fused = sem_weight * float(semantic) + kw_weight * float(lexical)
            scored.append(ScoredChunk(
                chunk=chunk,
                semantic_score=float(semantic),
                lexical_score=float(lexical),
                fused_score=fused,
            ))

        ranked = sorted(scored, key=lambda s: s.fused_score, reverse=True)

        if self._verbose:
            self._print_diagnostics(lexical_query, ranked)

        return ranked

    def rank(
        self,
        chunks: Sequence[Chunk],
        query_vector: np.ndarray,
        query_text: str,
        top_k: int = DEFAULT_TOP_K,
        semantic_weight: Optional[float] = None,
    ) -> List[Chunk]:
        """
        Hybrid ranking.

        Args:
            chunks:          All chunks of one document.
            query_vector:    Embedding of the query (same model as the chunks).
            query_text:      Raw query text, used for keyword scoring.
            top_k:           Maximum number of chunks to return.
            semantic_weight: Overrides the ranker default for this call.

        Returns:
            At most top_k chunks ranked by fused score, descending.
        """
        scored = self.score(chunks, query_vector, query_text, semantic_weight)
        return [s.chunk for s in scored[:max(top_k, 0)]]

    # ─── Single-family variants ───────────────────────────────────────────────

    def rank_by_similarity(
        self,
        chunks: Sequence[Chunk],
        query_vector: np.ndarray,
        top_k: int = DEFAULT_TOP_K,
    ) -> List[Chunk]:
        """Pure cosine ranking; the query text is not used."""
        if not chunks:
            return []
        scores = [cosine_similarity(query_vector, chunk.vector) for chunk in chunks]
        return _top_k_by_score(chunks, scores, top_k)

    def rank_by_keywords(
        self,
        chunks: Sequence[Chunk],
        query_text: str,
        top_k: int = DEFAULT_TOP_K,
    ) -> List[Chunk]:
        """Pure keyword ranking. A query with no usable terms ranks nothing."""
        lexical_query = LexicalQuery.from_text(query_text)
        if not chunks or lexical_query.is_empty:
            return []
        scores = [score_text(chunk.text, lexical_query) for chunk in chunks]
        return _top_k_by_score(chunks, scores, top_k)

    # ─── Diagnostics ──────────────────────────────────────────────────────────

    @staticmethod
    def _print_diagnostics(query: LexicalQuery, ranked: List[ScoredChunk]) -> None:
        print(f"[HybridRanker] Query: \"{query.text}\"")
        print(f"[HybridRanker] Expanded terms: {', '.join(query.terms)}")
        print(f"[HybridRanker] Chunks searched: {len(ranked)}")
        for rank, result in enumerate(ranked[:DIAGNOSTIC_ROWS], start=1):
            snippet = result.chunk.text[:SNIPPET_CHARS].replace("\n", " ")
            print(
                f"  {rank}. score={result.fused_score:.3f} "
                f"(sem={result.semantic_score:.3f}, kw={result.lexical_score:.3f}) "
                f"page {result.chunk.page_number}: \"{snippet}...\""
            )


def fusion_weights(lexical_score: float, semantic_weight: float) -> Tuple[float, float]:
    """
    Return (semantic, keyword) weights for one chunk, summing to 1.
    Strong keyword matches (normalized score > 0.5) shift weight to keywords.
    """
    keyword_weight = 1.0 - semantic_weight
    if lexical_score > KEYWORD_BOOST_THRESHOLD:
        keyword_weight *= KEYWORD_BOOST_FACTOR
        semantic_weight *= SEMANTIC_SHRINK_FACTOR
    total = semantic_weight + keyword_weight
    return semantic_weight / total, keyword_weight / total


def _normalize_by_max(scores: np.ndarray) -> np.ndarray:
    return scores / max(float(scores.max()), NORMALIZATION_EPSILON)


def _top_k_by_score(chunks: Sequence[Chunk], scores: Sequence[float], top_k: int) -> List[Chunk]:
    # sorted() is stable with reverse=True, so equal scores keep input order
    order = sorted(range(len(chunks)), key=lambda i: scores[i], reverse=True)
    return [chunks[i] for i in order[:max(top_k, 0)]]


def _validate_weight(semantic_weight: float) -> float:
    if not 0.0 <= semantic_weight <= 1.0:
        raise ValueError(f"semantic_weight must be within [0, 1], got {semantic_weight}")
    return semantic_weight
