"""Embedding cache, normalization, and wire encoding.

:class:`EmbeddingService` is the only way the rest of feedsim obtains
embeddings.  It turns the model's raw output into canonical unit vectors of
a fixed dimension and memoizes them by exact input text.

Truncation keeps the first ``dimension`` components of the model's native
output (384 for MiniLM) with no re-projection.  This is a deliberate
simplification and not a real dimensionality-reduction technique.
"""

import asyncio
import base64
import logging
import math
import struct

from .embedder import Embedder, EmbedderNotInitializedError
from ..settings import DEFAULT_EMBEDDING_DIM

logger = logging.getLogger(__name__)


def truncate(vec: list[float], dim: int) -> list[float]:
    """Keep the first ``dim`` components of ``vec``."""
    return list(vec[:dim])


def normalize(vec: list[float]) -> list[float]:
    """L2-normalize ``vec``.  The zero vector is returned unchanged."""
    norm = math.sqrt(sum(v * v for v in vec))
    if norm == 0:
        return list(vec)
    return [v / norm for v in vec]


class EmbeddingService:
    """Memoizing front for an :class:`Embedder`.

    Cache entries are keyed by the exact text (no whitespace or case
    folding), never evicted, and only dropped all at once by
    :meth:`clear_cache`.  Concurrent misses for the same text are not
    coalesced; each computes its own vector and the last write wins.
    """

    def __init__(self, embedder: Embedder, dimension: int = DEFAULT_EMBEDDING_DIM):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.embedder = embedder
        self.dimension = dimension
        self._cache: dict[str, list[float]] = {}

    @property
    def is_ready(self) -> bool:
        return self.embedder.is_initialized()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def get_embedding(self, text: str) -> list[float]:
        """Return the cached unit embedding for ``text``, computing it on a miss."""
        if not self.embedder.is_initialized():
            raise EmbedderNotInitializedError()

        cached = self._cache.get(text)
        if cached is not None:
            return cached

        logger.debug("Embedding cache miss (%d chars)", len(text))
        raw = await self.embedder.embed(text, pooling="mean", normalize=False)
        embedding = normalize(truncate(raw, self.dimension))
        self._cache[text] = embedding
        return embedding

    async def get_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.get_embedding(t) for t in texts)))


def encode_float32_b64(vec: list[float]) -> str:
    """Encode a list of floats as little-endian float32 bytes, then base64.

    Uses ``struct.pack`` with little-endian ``<f`` format for portability.
    """
    if vec is None:
        raise TypeError("vec must not be None")
    if not isinstance(vec, (list, tuple)):
        raise TypeError("vec must be a list or tuple of floats")
    packed = struct.pack(f"<{len(vec)}f", *vec)
    return base64.b64encode(packed).decode("ascii")


def decode_float32_b64(b64: str) -> list[float]:
    """Decode a base64 float32 little-endian encoded vector to ``list[float]``."""
    raw = base64.b64decode(b64)
    if len(raw) % 4 != 0:
        raise ValueError("invalid float32 byte length")
    count = len(raw) // 4
    return list(struct.unpack(f"<{count}f", raw))
