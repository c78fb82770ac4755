"""Sentence-transformers encoder for task titles and search queries."""

from functools import lru_cache
import logging

from sentence_transformers import SentenceTransformer

from .config import DEFAULT_EMBEDDING_MODEL

log = logging.getLogger(__name__)

MAX_TEXT_CHARS = 2000


class Embedder:
    """Normalized sentence embeddings, memoized per text.

    Duplicate detection classifies every title once per pair, so the same
    short texts are encoded over and over.
    """

    def __init__(self, model: str = DEFAULT_EMBEDDING_MODEL, *, cache_size: int = 4096):
        log.info(f"Loading embedding model: {model}")
        self.model = SentenceTransformer(model)
        self.dimensions = self.model.get_sentence_embedding_dimension()
        self._encode = lru_cache(maxsize=cache_size)(self._encode_text)
        log.info(f"Model loaded. Dimensions: {self.dimensions}")

    def _encode_text(self, text: str) -> tuple[float, ...]:
        vector = self.model.encode(text[:MAX_TEXT_CHARS], normalize_embeddings=True)
        return tuple(vector.tolist())

    def embed(self, text: str) -> list[float]:
        """Embedding of ``text`` with surrounding whitespace ignored."""
        return list(self._encode(text.strip()))
