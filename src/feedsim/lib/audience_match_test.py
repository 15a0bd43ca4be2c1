"""Tests for persona/audience matching."""

import pytest

from ..data.personas import get_persona
from .audience_match import DEFAULT_AUDIENCES, AudienceMatcher
from .embedder import Embedder
from .embeddings import EmbeddingService


async def label_embed(text, pooling, normalize):
    """Engineers look like tech, then students, then founders; bots match everyone."""
    vectors = {
        "Tech Enthusiasts": [1.0, 0.0, 0.0],
        "Students": [0.8, 0.6, 0.0],
        "Founders": [0.6, 0.8, 0.0],
        "Bots / Inactive": [1.0, 0.0, 0.0],
        "Software Engineer": [1.0, 0.0, 0.0],
    }
    for prefix, vector in vectors.items():
        if text.startswith(prefix):
            return vector
    return [0.0, 0.0, 1.0]


class FailingEmbedFn:
    async def __call__(self, text, pooling, normalize):
        raise RuntimeError("model crashed")


class TestFindMatchingAudiences:
    @pytest.mark.asyncio
    async def test_ranks_by_similarity_and_skips_bots(self):
        matcher = AudienceMatcher(EmbeddingService(Embedder(embed_fn=label_embed)))

        result = await matcher.find_matching_audiences(get_persona("software-engineer"))

        assert result == ["tech", "students", "founders"]

    @pytest.mark.asyncio
    async def test_top_n(self):
        matcher = AudienceMatcher(EmbeddingService(Embedder(embed_fn=label_embed)))

        result = await matcher.find_matching_audiences(get_persona("software-engineer"), top_n=1)

        assert result == ["tech"]

    @pytest.mark.asyncio
    async def test_defaults_when_model_not_loaded(self):
        matcher = AudienceMatcher(EmbeddingService(Embedder()))

        result = await matcher.find_matching_audiences(get_persona("designer"))

        assert result == DEFAULT_AUDIENCES
        assert result is not DEFAULT_AUDIENCES

    @pytest.mark.asyncio
    async def test_defaults_when_embedding_fails(self):
        matcher = AudienceMatcher(EmbeddingService(Embedder(embed_fn=FailingEmbedFn())))

        result = await matcher.find_matching_audiences(get_persona("designer"))

        assert result == DEFAULT_AUDIENCES

    @pytest.mark.asyncio
    async def test_audience_embeddings_cached(self):
        calls = []

        async def counting(text, pooling, normalize):
            calls.append(text)
            return await label_embed(text, pooling, normalize)

        service = EmbeddingService(Embedder(embed_fn=counting))
        matcher = AudienceMatcher(service)
        await matcher.find_matching_audiences(get_persona("software-engineer"))
        service.clear_cache()
        calls.clear()

        await matcher.find_matching_audiences(get_persona("software-engineer"))

        # Only the persona is re-embedded.
        assert calls == ["Software Engineer: Shipping code, breaking prod"]
