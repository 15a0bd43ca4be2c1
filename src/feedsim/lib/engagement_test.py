"""Tests for the engagement predictor."""

import pytest

from ..models import EngagementProbabilities
from .classifier import CONTENT_CATEGORIES, ContentClassifier
from .embedder import Embedder
from .embeddings import EmbeddingService
from .engagement import (
    BASE_RATES,
    DEFAULT_BASE_RATES,
    ENGAGEMENT_TYPES,
    EngagementPredictor,
    calculate_weighted_score,
    predict_for_category,
)

# One axis per category; a draft containing "lol" lands on the humor axis.
_AXIS_KEYWORDS = ["technology", "breaking news", "movies", "football", "finance", "research", "fitness", "funny"]


def _one_hot(i, dim=8):
    return [1.0 if j == i else 0.0 for j in range(dim)]


async def axis_embed(text, pooling, normalize):
    if "lol" in text:
        return _one_hot(7)
    for i, keyword in enumerate(_AXIS_KEYWORDS):
        if keyword in text:
            return _one_hot(i)
    return [1.0] * 8


def _as_dict(probs: EngagementProbabilities) -> dict:
    return probs.model_dump()


class TestWeightedScore:
    def test_all_ones(self):
        ones = EngagementProbabilities(like=1, repost=1, reply=1, bookmark=1, click=1)
        assert calculate_weighted_score(ones) == pytest.approx(6.2)

    def test_all_zero(self):
        zeros = EngagementProbabilities(like=0, repost=0, reply=0, bookmark=0, click=0)
        assert calculate_weighted_score(zeros) == 0

    def test_repost_weighted_highest(self):
        repost = EngagementProbabilities(like=0, repost=0.5, reply=0, bookmark=0, click=0)
        like = EngagementProbabilities(like=0.5, repost=0, reply=0, bookmark=0, click=0)
        assert calculate_weighted_score(repost) > calculate_weighted_score(like)


class TestPredictForCategory:
    def test_empty_mix_returns_base_rates(self):
        assert _as_dict(predict_for_category("tech", {})) == pytest.approx(BASE_RATES["tech"])

    def test_zero_total_weight_returns_base_rates(self):
        result = predict_for_category("news", {"tech": 0, "casual": 0})
        assert _as_dict(result) == pytest.approx(BASE_RATES["news"])

    def test_unknown_category_uses_defaults(self):
        assert _as_dict(predict_for_category("cooking", {})) == pytest.approx(DEFAULT_BASE_RATES)

    def test_single_audience_applies_multiplier_and_affinity(self):
        result = predict_for_category("tech", {"tech": 100})
        assert result.like == pytest.approx(0.15 * 1.0 * 1.3)
        assert result.repost == pytest.approx(0.08 * 1.2 * 1.3)
        assert result.bookmark == pytest.approx(0.20 * 1.5 * 1.3)
        assert result.click == pytest.approx(0.25 * 1.3 * 1.3)

    def test_weights_are_shares_of_total(self):
        result = predict_for_category("humor", {"tech": 50, "casual": 50})
        # tech: 1.0 * 1.0, casual: 1.2 * 1.4 -> mean 1.34
        assert result.like == pytest.approx(0.40 * 1.34)

    def test_unknown_audience_counts_as_neutral(self):
        result = predict_for_category("sports", {"aliens": 10})
        assert _as_dict(result) == pytest.approx(BASE_RATES["sports"])

    def test_bots_suppress_engagement(self):
        result = predict_for_category("humor", {"bots": 100})
        assert result.like == pytest.approx(0.04)

    def test_clamps_to_one(self, monkeypatch):
        monkeypatch.setitem(
            BASE_RATES, "humor",
            {"like": 0.9, "repost": 0.9, "reply": 0.9, "bookmark": 0.9, "click": 0.9},
        )
        result = predict_for_category("humor", {"casual": 100})
        assert result.like == 1.0

    @pytest.mark.parametrize("mix", [
        {},
        {"bots": 100},
        {"tech": 100},
        {"casual": 30, "creators": 70},
        {"tech": 12.5, "casual": 12.5, "news": 12.5, "creators": 12.5,
         "investors": 12.5, "founders": 12.5, "students": 12.5, "bots": 12.5},
        {"investors": 1000, "founders": 3},
    ])
    def test_every_field_within_unit_interval(self, mix):
        for category in CONTENT_CATEGORIES:
            result = _as_dict(predict_for_category(category.id, mix))
            assert set(result) == set(ENGAGEMENT_TYPES)
            assert all(0.0 <= v <= 1.0 for v in result.values())


class TestEngagementPredictor:
    @pytest.mark.asyncio
    async def test_uses_classified_category(self):
        classifier = ContentClassifier(EmbeddingService(Embedder(embed_fn=axis_embed)))
        await classifier.precompute_concept_embeddings()
        predictor = EngagementPredictor(classifier)

        result = await predictor.predict_engagement("lol my code works", {})

        assert _as_dict(result) == pytest.approx(BASE_RATES["humor"])
