# planqa/infrastructure/embedding_engine.py
# Local sentence-transformers encoder for page chunks and questions.
# Vectors come back L2-normalized, the same as the hash stand-in engine.

import numpy as np
from typing import List
from sentence_transformers import SentenceTransformer

from planqa.domain.interfaces import EmbeddingPort


DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"


class SentenceTransformerEngine(EmbeddingPort):

    def __init__(self, model_name: str = DEFAULT_MODEL_NAME, batch_size: int = 32):
        print(f"[EmbeddingEngine] Loading model: {model_name} ...")
        self._model_name = model_name
        self._batch_size = batch_size
        self._model = SentenceTransformer(model_name)
        print("[EmbeddingEngine] Model ready.")

    @property
    def model_name(self) -> str:
        """Used by the chunk store to detect vectors from a different model."""
        return self._model_name

    def encode(self, texts: List[str]) -> np.ndarray:
        return self._model.encode(
            texts,
            convert_to_numpy=True,
            show_progress_bar=len(texts) > self._batch_size,
            batch_size=self._batch_size,
            normalize_embeddings=True,
        )

    def encode_single(self, text: str) -> np.ndarray:
        return self._model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )
