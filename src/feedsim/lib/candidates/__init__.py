"""Candidate generation framework for the pipeline visualizer.

Provides an abstraction for named candidate generators that can be called
internally (as a pipeline step) or via an API endpoint.
"""

from .base import (
    CandidateGenerator,
    CandidateResult,
    get_generator,
    list_generators,
    register_generator,
)
from .synthetic_pool import SyntheticPoolGenerator, generate_tweet_pool, rank_by_preview

# Register built-in generators
_synthetic_pool = SyntheticPoolGenerator()
register_generator(_synthetic_pool)

__all__ = [
    "CandidateGenerator",
    "CandidateResult",
    "get_generator",
    "list_generators",
    "register_generator",
    "SyntheticPoolGenerator",
    "generate_tweet_pool",
    "rank_by_preview",
]
