"""Semantic reach estimator.

Biases a user-selected audience mix toward the audiences whose interests a
post is semantically close to:

1. cosine(post, audience interests) for each audience, floored at 0.01;
2. min-max normalize those similarities into [0.1, 1.0];
3. ``score = selected_weight * normalized_similarity ** 2.5``;
4. renormalize the scores to sum to 100.

The 2.5 exponent amplifies the advantage of well-aligned audiences over the
raw selection weights.

Callers that cannot await use the two-phase API: :meth:`ReachEstimator.last_known`
returns the most recent refreshed value (or the selected mix), and
:meth:`ReachEstimator.refresh` recomputes it.
"""

import logging

from ..data.audiences import AUDIENCES, Audience
from ..models import AudienceMix
from .embedder import EmbedderNotInitializedError
from .embeddings import EmbeddingService
from .similarity import cosine

logger = logging.getLogger(__name__)

SIMILARITY_FLOOR = 0.01
NORMALIZED_MIN = 0.1
NORMALIZED_MAX = 1.0
SEMANTIC_EXPONENT = 2.5


def _mix_key(text: str, mix: AudienceMix) -> tuple:
    return (text, tuple(sorted(mix.items())))


class ReachEstimator:
    def __init__(
        self,
        embeddings: EmbeddingService,
        audiences: tuple[Audience, ...] = AUDIENCES,
    ):
        self.embeddings = embeddings
        self.audiences = audiences
        self._audience_embeddings: dict[str, list[float]] | None = None
        self._last_key: tuple | None = None
        self._last_reach: AudienceMix | None = None

    async def init_audience_embeddings(self) -> None:
        """Embed every audience's interest description.

        Raises :class:`EmbedderNotInitializedError` if the model is not loaded.
        """
        if not self.embeddings.is_ready:
            raise EmbedderNotInitializedError("Embeddings model not initialized")

        table = {}
        for audience in self.audiences:
            table[audience.id] = await self.embeddings.get_embedding(audience.interests)
        self._audience_embeddings = table
        logger.info("Precomputed %d audience embeddings", len(table))

    def are_audience_embeddings_ready(self) -> bool:
        return (
            self._audience_embeddings is not None
            and len(self._audience_embeddings) == len(self.audiences)
        )

    def clear_audience_embeddings(self) -> None:
        self._audience_embeddings = None
        self._last_key = None
        self._last_reach = None

    async def compute_semantic_reach(self, text: str, selected_mix: AudienceMix) -> AudienceMix:
        """Reach percentages per audience, summing to 100.

        Returns a copy of ``selected_mix`` unchanged when audience
        embeddings are not ready.  An all-zero selection yields all zeros.
        """
        if not self.are_audience_embeddings_ready():
            return dict(selected_mix)

        text_embedding = await self.embeddings.get_embedding(text)

        similarities = [
            max(SIMILARITY_FLOOR, cosine(text_embedding, self._audience_embeddings[a.id]))
            for a in self.audiences
        ]

        lowest = min(similarities)
        spread = (max(similarities) - lowest) or 1.0
        span = NORMALIZED_MAX - NORMALIZED_MIN

        scores = {}
        for audience, similarity in zip(self.audiences, similarities):
            normalized = NORMALIZED_MIN + (similarity - lowest) / spread * span
            weight = selected_mix.get(audience.id, 0.0)
            scores[audience.id] = weight * normalized ** SEMANTIC_EXPONENT

        total = sum(scores.values()) or 1.0
        return {audience_id: score / total * 100 for audience_id, score in scores.items()}

    def last_known(self, text: str, selected_mix: AudienceMix) -> AudienceMix:
        """Last refreshed reach for this exact (text, mix), else the selected mix."""
        if self._last_reach is not None and self._last_key == _mix_key(text, selected_mix):
            return dict(self._last_reach)
        return dict(selected_mix)

    async def refresh(self, text: str, selected_mix: AudienceMix) -> AudienceMix:
        """Recompute reach for (text, mix) and remember it for :meth:`last_known`."""
        reach = await self.compute_semantic_reach(text, selected_mix)
        if self.are_audience_embeddings_ready():
            self._last_key = _mix_key(text, selected_mix)
            self._last_reach = dict(reach)
        return reach
