"""Muted keyword filter with optional semantic matching.

Usage::

    flt = MutedKeywordFilter(["spam", "hate speech"], embeddings)
    await flt.initialize_semantic_filtering()  # optional

    if await flt.should_filter(post_text):
        ...

Exact (case-insensitive substring) matches always take precedence over
semantic ones.
"""

import logging
import math

from ..models import FilterResult
from ..settings import DEFAULT_MUTED_KEYWORD_THRESHOLD
from .embeddings import EmbeddingService
from .similarity import cosine

logger = logging.getLogger(__name__)


def match_percent(similarity: float) -> int:
    """Similarity as a whole percent, rounding halves up."""
    return math.floor(similarity * 100 + 0.5)


class MutedKeywordFilter:
    def __init__(
        self,
        keywords: list[str],
        embeddings: EmbeddingService | None = None,
        semantic_threshold: float = DEFAULT_MUTED_KEYWORD_THRESHOLD,
    ):
        self.keywords = list(keywords)
        self.semantic_threshold = semantic_threshold
        self.embeddings = embeddings
        self._keywords_lower = [k.lower() for k in self.keywords]
        self._keyword_embeddings: list[tuple[str, list[float]]] = []
        self._semantic_initialized = False

    @property
    def semantic_enabled(self) -> bool:
        return (
            self._semantic_initialized
            and self.embeddings is not None
            and self.embeddings.is_ready
        )

    async def initialize_semantic_filtering(self) -> None:
        """Precompute one embedding per keyword.

        Does nothing if no embedding service is attached or the model is not
        loaded.  Calling it again replaces the stored embeddings.
        """
        if self.embeddings is None or not self.embeddings.is_ready:
            return

        vectors = await self.embeddings.get_embeddings(self.keywords)
        self._keyword_embeddings = list(zip(self.keywords, vectors))
        self._semantic_initialized = True
        logger.debug("Semantic filtering ready for %d keywords", len(vectors))

    async def should_filter(self, text: str) -> bool:
        result = await self.check_with_reason(text)
        return result.filtered

    async def check_with_reason(self, text: str) -> FilterResult:
        exact = self._find_exact_match(text)
        if exact is not None:
            return FilterResult(filtered=True, reason=f'Matched muted keyword: "{exact}"')

        if self.semantic_enabled:
            match = await self._find_semantic_match(text)
            if match is not None:
                keyword, similarity = match
                return FilterResult(
                    filtered=True,
                    reason=(
                        f'Semantically similar to muted keyword: "{keyword}" '
                        f"({match_percent(similarity)}% match)"
                    ),
                )

        return FilterResult(filtered=False, reason=None)

    def _find_exact_match(self, text: str) -> str | None:
        text_lower = text.lower()
        for keyword_lower in self._keywords_lower:
            if keyword_lower in text_lower:
                return keyword_lower
        return None

    async def _find_semantic_match(self, text: str) -> tuple[str, float] | None:
        text_embedding = await self.embeddings.get_embedding(text)

        best: tuple[str, float] | None = None
        for keyword, keyword_embedding in self._keyword_embeddings:
            similarity = cosine(text_embedding, keyword_embedding)
            if similarity >= self.semantic_threshold and (best is None or similarity > best[1]):
                best = (keyword, similarity)
        return best
