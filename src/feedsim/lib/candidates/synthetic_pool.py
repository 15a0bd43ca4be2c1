"""Synthetic candidate pool.

Fills category templates with random placeholder values to produce a pool of
plausible posts, then attaches real embeddings so the pool can be laid out
in vector space next to the user's draft:

1. Pick categories round-robin so every category is represented.
2. Fill a random template for the category and pick a random author.
3. Embed every text concurrently through the shared embedding cache.
"""

import logging
import random
import re
import string
import time

from ...models import CandidatePost
from ..embeddings import EmbeddingService
from ..similarity import cosine_preview
from .base import CandidateGenerator, CandidateResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Template data
# ---------------------------------------------------------------------------

AUTHORS = (
    "@techfounder",
    "@devguru",
    "@startuplife",
    "@airesearcher",
    "@newsreporter",
    "@breakingnews",
    "@worldevents",
    "@politicswatcher",
    "@moviecritic",
    "@musiclover",
    "@celebwatcher",
    "@streamingfan",
    "@comedywriter",
    "@memepage",
    "@funnymoments",
    "@jokemaster",
    "@businessinsider",
    "@marketwatch",
    "@financeexpert",
    "@stocktrader",
)

TWEET_TEMPLATES: dict[str, list[str]] = {
    "tech": [
        "Just shipped a new feature using {tech}. The DX is incredible!",
        "Been playing with {tech} all weekend. Game changer for developer productivity.",
        "Hot take: {tech} will replace {tech2} within 5 years.",
        "Finally migrated our codebase to {tech}. No regrets.",
        "The {tech} community is so welcoming. Just got my first PR merged!",
        "Debugging {tech} at 3am. Living the dream.",
        "TIL about this amazing {tech} feature. Mind = blown.",
        "{tech} + {tech2} = the perfect stack for 2024.",
    ],
    "news": [
        "Breaking: Major developments in {topic} today.",
        "JUST IN: {topic} situation escalates.",
        "Latest update on {topic} - here is what we know so far.",
        "Developing story: {topic} takes unexpected turn.",
        "Sources confirm major announcement regarding {topic}.",
        "Timeline of events in {topic} situation.",
    ],
    "entertainment": [
        "Can not stop thinking about {show}. What an ending!",
        "Just finished {show} and I am emotionally destroyed.",
        "{movie} deserves all the awards. Incredible cinematography.",
        "The soundtrack for {show} is absolutely phenomenal.",
        "Hot take: {movie} is actually underrated.",
        "Anyone else obsessed with {show} right now?",
    ],
    "humor": [
        "POV: You are debugging at 3am",
        "Me: I will just write a quick script\n*6 hours later*",
        "Programmers be like: it works on my machine",
        "My code: *works perfectly in dev*\nProduction: no",
        "Stack Overflow: *closes question as duplicate*\nMe: but...",
        "That feeling when git blame shows it was you all along",
        "Code review: can you add some comments?\nMe: // magic happens here",
    ],
    "business": [
        "Q4 earnings looking strong. {company} up 15% this quarter.",
        "Market analysis: Why {industry} is poised for growth.",
        "Leadership lesson: The importance of {concept} in modern business.",
        "{company} announces major expansion into {industry}.",
        "The future of {industry} is here. Key trends to watch.",
        "Interesting moves in the {industry} space today.",
    ],
}

PLACEHOLDERS: dict[str, list[str]] = {
    "tech": ["React", "TypeScript", "Rust", "Go", "Python", "Node.js", "Svelte", "Vue", "Next.js", "Bun"],
    "tech2": ["JavaScript", "Java", "C++", "PHP", "Ruby", "Angular", "jQuery", "Webpack"],
    "topic": ["climate policy", "tech regulation", "economic reform", "international relations", "healthcare"],
    "show": ["The Bear", "Severance", "Succession", "White Lotus", "House of the Dragon"],
    "movie": ["Oppenheimer", "Barbie", "Dune Part Two", "Poor Things", "The Holdovers"],
    "company": ["Apple", "Microsoft", "Amazon", "Tesla", "Google", "Meta", "Nvidia"],
    "industry": ["AI", "fintech", "biotech", "clean energy", "e-commerce", "cybersecurity"],
    "concept": ["transparency", "agile methodologies", "remote work", "work-life balance", "innovation"],
}

POOL_CATEGORIES = tuple(TWEET_TEMPLATES)

FALLBACK_TEXT = "This is a sample tweet."

DAY_MS = 24 * 60 * 60 * 1000

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")
_BASE36 = string.digits + string.ascii_lowercase


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def fill_template(template: str, rng: random.Random) -> str:
    """Replace each ``{key}`` with a random value; unknown keys are left as-is."""

    def _replace(match: re.Match) -> str:
        values = PLACEHOLDERS.get(match.group(1))
        if not values:
            return match.group(0)
        return rng.choice(values)

    return _PLACEHOLDER_RE.sub(_replace, template)


def generate_tweet_text(category: str, rng: random.Random) -> str:
    templates = TWEET_TEMPLATES.get(category)
    if not templates:
        return FALLBACK_TEXT
    return fill_template(rng.choice(templates), rng)


def generate_id(index: int, now_ms: int, rng: random.Random) -> str:
    suffix = "".join(rng.choice(_BASE36) for _ in range(6))
    return f"tweet_{to_base36(now_ms)}_{suffix}_{index}"


async def generate_tweet_pool(
    count: int,
    embeddings: EmbeddingService,
    rng: random.Random | None = None,
    generator_name: str | None = None,
) -> list[CandidatePost]:
    """Generate ``count`` synthetic posts with real embeddings attached."""
    if count <= 0:
        return []

    rng = rng or random.Random()
    now_ms = int(time.time() * 1000)

    drafts = []
    for i in range(count):
        category = POOL_CATEGORIES[i % len(POOL_CATEGORIES)]
        drafts.append({
            "id": generate_id(i, now_ms, rng),
            "text": generate_tweet_text(category, rng),
            "author": rng.choice(AUTHORS),
            "category": category,
            "timestamp": now_ms - rng.randrange(DAY_MS),
        })

    vectors = await embeddings.get_embeddings([d["text"] for d in drafts])
    logger.info("Generated synthetic pool of %d posts", count)

    return [
        CandidatePost(**draft, embedding=vector, generator_name=generator_name)
        for draft, vector in zip(drafts, vectors)
    ]


def rank_by_preview(query_embedding: list[float], posts: list[CandidatePost]) -> list[CandidatePost]:
    """Score posts by preview cosine to ``query_embedding``, best first."""
    scored = [
        post.model_copy(update={"score": cosine_preview(query_embedding, post.embedding)})
        for post in posts
    ]
    return sorted(scored, key=lambda p: p.score, reverse=True)


# ---------------------------------------------------------------------------
# Generator class
# ---------------------------------------------------------------------------

class SyntheticPoolGenerator(CandidateGenerator):
    """Template-filled synthetic posts used as comparison points.

    Pass a seeded ``random.Random`` for reproducible pools.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    @property
    def name(self) -> str:
        return "synthetic_pool"

    async def generate(
        self,
        embeddings: EmbeddingService,
        num_candidates: int = 100,
    ) -> CandidateResult:
        candidates = await generate_tweet_pool(
            num_candidates, embeddings, rng=self._rng, generator_name=self.name,
        )
        return CandidateResult(generator_name=self.name, candidates=candidates)
