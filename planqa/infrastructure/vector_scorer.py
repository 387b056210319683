# planqa/infrastructure/vector_scorer.py

from typing import Sequence, Union
import numpy as np


VectorLike = Union[np.ndarray, Sequence[float]]


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine similarity in [-1, 1].

    Degenerate inputs score 0.0 instead of raising: vectors of different
    length (e.g. produced by two different embedding models) and vectors
    with a norm of exactly zero.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        return 0.0

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    # Rounding can push identical vectors a hair past 1.0
    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))
