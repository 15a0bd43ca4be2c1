"""Semantic matching between author personas and audiences.

Used to pre-select a sensible audience mix for a persona: the persona's
name and subtitle are compared against each audience's label and
interests.
"""

import logging

from ..data.audiences import AUDIENCES, Audience
from ..data.personas import Persona
from .embeddings import EmbeddingService
from .similarity import cosine

logger = logging.getLogger(__name__)

DEFAULT_AUDIENCES = ["tech", "founders", "news"]

# Never auto-selected for a persona.
EXCLUDED_AUDIENCES = frozenset({"bots"})


class AudienceMatcher:
    def __init__(
        self,
        embeddings: EmbeddingService,
        audiences: tuple[Audience, ...] = AUDIENCES,
    ):
        self.embeddings = embeddings
        self.audiences = audiences
        self._audience_embeddings: dict[str, list[float]] | None = None

    def clear_audience_cache(self) -> None:
        self._audience_embeddings = None

    async def _get_audience_embeddings(self) -> dict[str, list[float]]:
        if self._audience_embeddings is None:
            texts = [f"{a.label}: {a.interests}" for a in self.audiences]
            vectors = await self.embeddings.get_embeddings(texts)
            self._audience_embeddings = {a.id: v for a, v in zip(self.audiences, vectors)}
        return self._audience_embeddings

    async def find_matching_audiences(self, persona: Persona, top_n: int = 3) -> list[str]:
        """Ids of the ``top_n`` audiences most similar to ``persona``.

        Falls back to a fixed default when the model is not loaded or
        embedding fails.
        """
        if not self.embeddings.is_ready:
            return list(DEFAULT_AUDIENCES)

        try:
            persona_embedding = await self.embeddings.get_embedding(
                f"{persona.name}: {persona.subtitle}"
            )
            audience_embeddings = await self._get_audience_embeddings()
        except Exception:
            logger.exception("Failed to compute semantic audience match for %s", persona.id)
            return list(DEFAULT_AUDIENCES)

        scored = [
            (audience_id, cosine(persona_embedding, embedding))
            for audience_id, embedding in audience_embeddings.items()
            if audience_id not in EXCLUDED_AUDIENCES
        ]
        scored.sort(key=lambda item: item[1], reverse=True)
        return [audience_id for audience_id, _ in scored[:top_n]]
