"""Deterministic engagement simulation.

Turns a persona, a post and an audience mix into illustrative impression and
engagement counts, then recovers per-type rates with a Bernoulli maximum
likelihood estimate (successes / trials).
"""

import math

from ..data.personas import get_persona
from ..models import AudienceMix, EngagementCounts, EngagementRates, SimulationResult

MAX_TWEET_LENGTH = 280

TECH_AUDIENCE_IDS = ("tech", "founders", "investors", "students")

# Baseline per-impression rates before the engagement factor is applied.
BASE_LIKE_RATE = 0.06
BASE_REPOST_RATE = 0.012
BASE_REPLY_RATE = 0.006
BASE_BOOKMARK_RATE = 0.01
BASE_CLICK_RATE = 0.02


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _round_half_up(value: float) -> int:
    # 2.5 -> 3, unlike round()
    return math.floor(value + 0.5)


def _to_count(impressions: int, rate: float) -> int:
    return min(impressions, max(0, _round_half_up(impressions * rate)))


def estimate_bernoulli_mle(successes: float, trials: float) -> float:
    """MLE of a Bernoulli rate, clamped to [0, 1]; 0 when there are no trials."""
    if trials <= 0:
        return 0.0
    return _clamp(successes / trials, 0.0, 1.0)


def simulate_engagement(persona_id: str, tweet_text: str, audience_mix: AudienceMix) -> SimulationResult:
    persona = get_persona(persona_id)
    bots_share = _clamp(audience_mix.get("bots", 0.0), 0, 100) / 100
    active_share = 1 - bots_share
    technical_share = sum(audience_mix.get(a, 0.0) for a in TECH_AUDIENCE_IDS) / 100

    if persona is not None and persona.technical:
        persona_affinity = 0.9 + technical_share * 0.4
    else:
        persona_affinity = 0.9 + (1 - technical_share) * 0.4
    length_factor = 0.85 + _clamp(len(tweet_text) / MAX_TWEET_LENGTH, 0, 1) * 0.4
    active_factor = 0.8 + active_share * 0.4
    engagement_factor = _clamp(length_factor * persona_affinity * active_factor, 0.6, 1.6)

    impressions = max(120, _round_half_up(420 + len(tweet_text) * 4 + active_share * 900))

    counts = EngagementCounts(
        impressions=impressions,
        likes=_to_count(impressions, BASE_LIKE_RATE * engagement_factor),
        reposts=_to_count(impressions, BASE_REPOST_RATE * engagement_factor),
        replies=_to_count(impressions, BASE_REPLY_RATE * engagement_factor),
        bookmarks=_to_count(impressions, BASE_BOOKMARK_RATE * engagement_factor),
        clicks=_to_count(impressions, BASE_CLICK_RATE * engagement_factor),
    )
    rates = EngagementRates(
        like_rate=estimate_bernoulli_mle(counts.likes, impressions),
        repost_rate=estimate_bernoulli_mle(counts.reposts, impressions),
        reply_rate=estimate_bernoulli_mle(counts.replies, impressions),
        bookmark_rate=estimate_bernoulli_mle(counts.bookmarks, impressions),
        click_rate=estimate_bernoulli_mle(counts.clicks, impressions),
    )
    return SimulationResult(counts=counts, rates=rates)
