# planqa/infrastructure/hash_embedding.py

import hashlib
import numpy as np
from typing import List

from planqa.domain.interfaces import EmbeddingPort


DEFAULT_DIMENSION = 1536

# Linear congruential generator constants
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2147483647  # 2^31 - 1


def hash_embedding(text: str, dimension: int = DEFAULT_DIMENSION) -> np.ndarray:
    """
    Deterministic stand-in for a real embedding model.

    SHA-256 of the text seeds an LCG; its outputs are mapped to [-1, 1] and
    the vector is scaled to unit length. Identical text always gives the same
    vector, different texts give nearly orthogonal ones.
    """
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    state = int(digest[:8], 16)

    values = np.empty(dimension, dtype=np.float64)
    for i in range(dimension):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        values[i] = (state / LCG_MODULUS) * 2 - 1

    magnitude = np.linalg.norm(values)
    if magnitude == 0.0:
        return values
    return values / magnitude


class HashEmbeddingEngine(EmbeddingPort):
    """Offline engine for tests and demos. Needs no model download."""

    def __init__(self, dimension: int = DEFAULT_DIMENSION):
        self._dimension = dimension

    @property
    def model_name(self) -> str:
        return f"hash-embedding-{self._dimension}"

    def encode(self, texts: List[str]) -> np.ndarray:
        if not texts:
            return np.empty((0, self._dimension), dtype=np.float64)
        return np.stack([hash_embedding(text, self._dimension) for text in texts])

    def encode_single(self, text: str) -> np.ndarray:
        return hash_embedding(text, self._dimension)
