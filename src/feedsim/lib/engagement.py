"""Engagement predictor.

Predicts like/repost/reply/bookmark/click probabilities for a post from its
content category and the audience mix it is shown to:

1. Classify the text and look up the category's base rates.
2. For each engagement type, average the per-audience multipliers (times a
   category/audience affinity bonus) weighted by each audience's share of
   the mix.
3. Scale the base rate by that multiplier and clamp to [0, 1].

The numbers are illustrative, not taken from any production system.
"""

from ..models import AudienceMix, EngagementProbabilities
from .classifier import ContentClassifier

ENGAGEMENT_TYPES = ("like", "repost", "reply", "bookmark", "click")

# Fixed weights for the combined engagement score; reposts count most.
ENGAGEMENT_WEIGHTS = {
    "like": 1.0,
    "repost": 2.0,
    "reply": 1.5,
    "bookmark": 1.2,
    "click": 0.5,
}

BASE_RATES: dict[str, dict[str, float]] = {
    "tech": {"like": 0.15, "repost": 0.08, "reply": 0.10, "bookmark": 0.20, "click": 0.25},
    "news": {"like": 0.12, "repost": 0.15, "reply": 0.18, "bookmark": 0.08, "click": 0.20},
    "entertainment": {"like": 0.35, "repost": 0.12, "reply": 0.08, "bookmark": 0.05, "click": 0.10},
    "sports": {"like": 0.25, "repost": 0.10, "reply": 0.15, "bookmark": 0.06, "click": 0.12},
    "business": {"like": 0.10, "repost": 0.06, "reply": 0.08, "bookmark": 0.15, "click": 0.18},
    "science": {"like": 0.12, "repost": 0.10, "reply": 0.12, "bookmark": 0.18, "click": 0.22},
    "lifestyle": {"like": 0.28, "repost": 0.08, "reply": 0.10, "bookmark": 0.10, "click": 0.15},
    "humor": {"like": 0.40, "repost": 0.20, "reply": 0.12, "bookmark": 0.03, "click": 0.05},
}

DEFAULT_BASE_RATES = {"like": 0.15, "repost": 0.08, "reply": 0.10, "bookmark": 0.10, "click": 0.15}

# Audience -> engagement type -> multiplier.  Unlisted pairs are 1.0.
AUDIENCE_MULTIPLIERS: dict[str, dict[str, float]] = {
    "tech": {"bookmark": 1.5, "click": 1.3, "repost": 1.2},
    "casual": {"like": 1.2, "repost": 0.8},
    "news": {"repost": 1.3, "reply": 1.2},
    "creators": {"repost": 1.4, "reply": 1.3},
    "investors": {"bookmark": 1.4, "click": 1.2},
    "founders": {"repost": 1.3, "bookmark": 1.3},
    "students": {"like": 1.3, "bookmark": 1.2},
    "bots": {"like": 0.1, "repost": 0.1, "reply": 0.1, "bookmark": 0.1, "click": 0.1},
}

# Category -> audience -> affinity bonus.  Unlisted pairs are 1.0.
CATEGORY_AUDIENCE_AFFINITY: dict[str, dict[str, float]] = {
    "tech": {"tech": 1.3, "founders": 1.2, "investors": 1.1},
    "news": {"news": 1.3, "casual": 1.1},
    "entertainment": {"casual": 1.3, "creators": 1.2},
    "sports": {"casual": 1.2},
    "business": {"investors": 1.4, "founders": 1.3},
    "science": {"tech": 1.2, "students": 1.3},
    "lifestyle": {"casual": 1.3, "creators": 1.2},
    "humor": {"casual": 1.4, "creators": 1.3},
}


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def predict_for_category(category_id: str, audience_mix: AudienceMix) -> EngagementProbabilities:
    """Engagement probabilities for an already-classified category."""
    base_rates = BASE_RATES.get(category_id, DEFAULT_BASE_RATES)
    total_weight = sum(audience_mix.values())

    if total_weight == 0:
        return EngagementProbabilities(**{t: clamp01(base_rates[t]) for t in ENGAGEMENT_TYPES})

    affinities = CATEGORY_AUDIENCE_AFFINITY.get(category_id, {})
    result = {}
    for engagement_type in ENGAGEMENT_TYPES:
        weighted_multiplier = 0.0
        for audience_id, weight in audience_mix.items():
            base_multiplier = AUDIENCE_MULTIPLIERS.get(audience_id, {}).get(engagement_type, 1.0)
            affinity_bonus = affinities.get(audience_id, 1.0)
            weighted_multiplier += base_multiplier * affinity_bonus * weight
        multiplier = weighted_multiplier / total_weight
        result[engagement_type] = clamp01(base_rates[engagement_type] * multiplier)

    return EngagementProbabilities(**result)


def calculate_weighted_score(probs: EngagementProbabilities) -> float:
    """Weighted sum: like*1.0 + repost*2.0 + reply*1.5 + bookmark*1.2 + click*0.5."""
    return (
        probs.like * ENGAGEMENT_WEIGHTS["like"]
        + probs.repost * ENGAGEMENT_WEIGHTS["repost"]
        + probs.reply * ENGAGEMENT_WEIGHTS["reply"]
        + probs.bookmark * ENGAGEMENT_WEIGHTS["bookmark"]
        + probs.click * ENGAGEMENT_WEIGHTS["click"]
    )


class EngagementPredictor:
    def __init__(self, classifier: ContentClassifier):
        self.classifier = classifier

    async def predict_engagement(self, text: str, audience_mix: AudienceMix) -> EngagementProbabilities:
        """Classify ``text`` and predict engagement for ``audience_mix``."""
        classification = await self.classifier.classify_content(text)
        return predict_for_category(classification.top_category.id, audience_mix)
