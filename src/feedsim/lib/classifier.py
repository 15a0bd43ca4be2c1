"""Content classifier using embedding similarity.

Text is categorized by comparing its embedding to precomputed embeddings of
short concept phrases, one per category.  Every category gets a score; the
result lists all of them, best first.
"""

import logging
from typing import NamedTuple

from ..models import CategoryScore, ClassificationResult
from .embeddings import EmbeddingService
from .similarity import cosine

logger = logging.getLogger(__name__)


class ContentCategory(NamedTuple):
    id: str
    label: str
    concept: str


CONTENT_CATEGORIES: tuple[ContentCategory, ...] = (
    ContentCategory("tech", "Technology", "technology software engineering programming AI"),
    ContentCategory("news", "News", "breaking news current events politics world"),
    ContentCategory("entertainment", "Entertainment", "movies music celebrities entertainment media"),
    ContentCategory("sports", "Sports", "sports football basketball soccer athletics"),
    ContentCategory("business", "Business", "business finance stocks market economy"),
    ContentCategory("science", "Science", "science research discovery biology physics"),
    ContentCategory("lifestyle", "Lifestyle", "lifestyle health fitness food travel"),
    ContentCategory("humor", "Humor", "funny jokes memes comedy humor"),
)


class ContentClassifier:
    def __init__(
        self,
        embeddings: EmbeddingService,
        categories: tuple[ContentCategory, ...] = CONTENT_CATEGORIES,
    ):
        self.embeddings = embeddings
        self.categories = categories
        self._concept_embeddings: dict[str, list[float]] = {}

    @property
    def has_concept_embeddings(self) -> bool:
        return len(self._concept_embeddings) == len(self.categories)

    async def precompute_concept_embeddings(self) -> None:
        """Embed every category concept, replacing any previous table.

        Must run before :meth:`classify_content` gives meaningful results.
        """
        vectors = await self.embeddings.get_embeddings([c.concept for c in self.categories])
        self._concept_embeddings = {c.id: v for c, v in zip(self.categories, vectors)}
        logger.info("Precomputed %d concept embeddings", len(vectors))

    def clear_concept_embeddings(self) -> None:
        self._concept_embeddings = {}

    async def classify_content(self, text: str) -> ClassificationResult:
        """Score ``text`` against every category, highest similarity first.

        Without precomputed concepts every similarity is 0 and the top
        category falls back to the first one declared.
        """
        text_embedding = await self.embeddings.get_embedding(text)

        scores = []
        for category in self.categories:
            concept_embedding = self._concept_embeddings.get(category.id)
            similarity = cosine(text_embedding, concept_embedding) if concept_embedding else 0.0
            scores.append(CategoryScore(id=category.id, label=category.label, similarity=similarity))

        # sorted() is stable, so ties keep declaration order.
        scores = sorted(scores, key=lambda s: s.similarity, reverse=True)
        return ClassificationResult(categories=scores, top_category=scores[0])
