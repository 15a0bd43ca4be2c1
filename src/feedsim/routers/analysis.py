"""Analysis router – runs a draft post through the semantic pipeline stages.

POST /analysis/classify           content category scores
POST /analysis/engagement         engagement probabilities + weighted score
POST /analysis/reach              semantic reach over the audience mix
POST /analysis/filter             muted-keyword filter decision
POST /analysis/audiences/match    audiences matching a persona
POST /analysis/simulate           simulated engagement counts and rates
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..data.personas import get_persona
from ..lib.engagement import calculate_weighted_score
from ..lib.simulation import simulate_engagement
from ..models import (
    ClassificationResult,
    EngagementProbabilities,
    FilterResult,
    SimulationResult,
)
from ..security import verify_api_key
from .common import get_pipeline, require_embeddings

router = APIRouter(tags=["analysis"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)

NonNegativeWeight = Annotated[float, Field(ge=0)]


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class TextRequest(BaseModel):
    text: str = Field(..., description="Draft post text")


class EngagementRequest(BaseModel):
    text: str = Field(..., description="Draft post text")
    audience_mix: dict[str, NonNegativeWeight] = Field(
        default_factory=dict, description="Audience id -> weight (percent)"
    )


class EngagementResponse(BaseModel):
    probabilities: EngagementProbabilities
    weighted_score: float


class ReachRequest(BaseModel):
    text: str = Field(..., description="Draft post text")
    selected_mix: dict[str, NonNegativeWeight] = Field(
        ..., description="User-selected audience mix (audience id -> percent)"
    )


class ReachResponse(BaseModel):
    reach: dict[str, float]
    semantic: bool = Field(
        ..., description="False when audience embeddings were not ready and the selected mix was returned"
    )


class FilterRequest(BaseModel):
    text: str = Field(..., description="Post text to check")
    keywords: list[str] = Field(default_factory=list, description="Muted keywords/phrases")
    semantic: bool = Field(True, description="Also match semantically similar text")
    semantic_threshold: float | None = Field(
        None, ge=-1.0, le=1.0, description="Cosine similarity threshold (default 0.85)"
    )


class AudienceMatchRequest(BaseModel):
    persona_id: str
    top_n: int = Field(3, ge=1, le=7)


class AudienceMatchResponse(BaseModel):
    audiences: list[str]


class SimulateRequest(BaseModel):
    persona_id: str
    text: str
    audience_mix: dict[str, NonNegativeWeight] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/analysis/classify", response_model=ClassificationResult)
async def analysis_classify(request: Request, payload: TextRequest) -> ClassificationResult:
    pipeline = get_pipeline(request)
    require_embeddings(pipeline)
    return await pipeline.classifier.classify_content(payload.text)


@router.post("/analysis/engagement", response_model=EngagementResponse)
async def analysis_engagement(request: Request, payload: EngagementRequest) -> EngagementResponse:
    pipeline = get_pipeline(request)
    require_embeddings(pipeline)
    probs = await pipeline.engagement.predict_engagement(payload.text, payload.audience_mix)
    return EngagementResponse(probabilities=probs, weighted_score=calculate_weighted_score(probs))


@router.post("/analysis/reach", response_model=ReachResponse)
async def analysis_reach(request: Request, payload: ReachRequest) -> ReachResponse:
    """Semantic reach, or the selected mix unchanged while embeddings load."""
    pipeline = get_pipeline(request)
    if not pipeline.reach.are_audience_embeddings_ready():
        return ReachResponse(reach=dict(payload.selected_mix), semantic=False)

    reach = await pipeline.reach.refresh(payload.text, payload.selected_mix)
    return ReachResponse(reach=reach, semantic=True)


@router.post("/analysis/filter", response_model=FilterResult)
async def analysis_filter(request: Request, payload: FilterRequest) -> FilterResult:
    pipeline = get_pipeline(request)
    flt = pipeline.muted_keyword_filter(payload.keywords, payload.semantic_threshold)
    if payload.semantic:
        await flt.initialize_semantic_filtering()
    return await flt.check_with_reason(payload.text)


@router.post("/analysis/audiences/match", response_model=AudienceMatchResponse)
async def analysis_match_audiences(request: Request, payload: AudienceMatchRequest) -> AudienceMatchResponse:
    persona = get_persona(payload.persona_id)
    if persona is None:
        raise HTTPException(status_code=404, detail=f"Unknown persona: {payload.persona_id}")

    pipeline = get_pipeline(request)
    audiences = await pipeline.audience_matcher.find_matching_audiences(persona, payload.top_n)
    return AudienceMatchResponse(audiences=audiences)


@router.post("/analysis/simulate", response_model=SimulationResult)
async def analysis_simulate(payload: SimulateRequest) -> SimulationResult:
    if get_persona(payload.persona_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown persona: {payload.persona_id}")
    return simulate_engagement(payload.persona_id, payload.text, payload.audience_mix)
