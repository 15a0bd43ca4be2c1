from typing import Literal

from pydantic import BaseModel, Field

# Audience id -> non-negative weight (percentages by convention).
AudienceMix = dict[str, float]


class CategoryScore(BaseModel):
    """Similarity between a piece of text and one content category."""

    id: str
    label: str
    similarity: float


class ClassificationResult(BaseModel):
    categories: list[CategoryScore] = Field(
        ..., description="All categories sorted by similarity (highest first)"
    )
    top_category: CategoryScore = Field(
        ..., description="The category with the highest similarity"
    )


class EngagementProbabilities(BaseModel):
    """Probability of each engagement type, each in [0, 1]."""

    like: float = Field(..., ge=0.0, le=1.0)
    repost: float = Field(..., ge=0.0, le=1.0)
    reply: float = Field(..., ge=0.0, le=1.0)
    bookmark: float = Field(..., ge=0.0, le=1.0)
    click: float = Field(..., ge=0.0, le=1.0)


class FilterResult(BaseModel):
    filtered: bool = Field(..., description="Whether the content should be filtered")
    reason: str | None = Field(
        None, description="Human-readable reason for filtering, null if not filtered"
    )


class CandidatePost(BaseModel):
    """A synthetic post from a candidate generator."""

    id: str = Field(..., description="Generated post id (tweet_<time>_<rand>_<index>)")
    text: str = Field(..., description="The post text content")
    author: str = Field(..., description="Simulated author handle")
    category: str = Field(..., description="Content category the text was drawn from")
    timestamp: int = Field(..., description="Creation time in epoch milliseconds")
    embedding: list[float] = Field(
        default_factory=list, description="Unit-normalized embedding of the text"
    )
    score: float | None = Field(
        None, description="Preview similarity to a query text (if ranked)"
    )
    generator_name: str | None = Field(
        None, description="Name of the generator that produced this post"
    )


class MLStatus(BaseModel):
    """Load status of the semantic pipeline, as shown on a loading screen."""

    status: Literal["idle", "loading", "ready", "error"] = "idle"
    progress: float = Field(0.0, ge=0.0, le=1.0)
    current_step: str | None = None
    error: str | None = None


class EngagementCounts(BaseModel):
    impressions: int
    likes: int
    reposts: int
    replies: int
    bookmarks: int
    clicks: int


class EngagementRates(BaseModel):
    like_rate: float
    repost_rate: float
    reply_rate: float
    bookmark_rate: float
    click_rate: float


class SimulationResult(BaseModel):
    counts: EngagementCounts
    rates: EngagementRates
