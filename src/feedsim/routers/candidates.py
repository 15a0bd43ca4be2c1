"""Candidates router – exposes candidate generators via HTTP.

GET /candidates/generators
    List available generators.

POST /candidates/generate
    Run a named generator and return its posts, optionally ranked by preview
    similarity to a draft text.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..lib.candidates import get_generator, list_generators, rank_by_preview
from ..models import CandidatePost
from ..security import verify_api_key
from .common import get_pipeline, require_embeddings

router = APIRouter(tags=["candidates"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class CandidateGenerateRequest(BaseModel):
    """Request body for the generate endpoint."""

    name: str = Field("synthetic_pool", description="Name of the candidate generator")
    num_candidates: int = Field(50, ge=1, le=500, description="Number of candidates to return")
    query_text: str | None = Field(
        None,
        description=(
            "Draft text to rank candidates against using a coarse "
            "preview similarity. If omitted, generation order is kept."
        ),
    )


class CandidateGenerateResponse(BaseModel):
    """Response body returning the generated candidates."""

    candidates: list[CandidatePost]


class GeneratorListResponse(BaseModel):
    """Lists available generator names."""

    generators: list[str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/candidates/generators", response_model=GeneratorListResponse)
async def candidates_list_generators() -> GeneratorListResponse:
    """Return the names of all registered candidate generators."""
    return GeneratorListResponse(generators=list_generators())


@router.post("/candidates/generate", response_model=CandidateGenerateResponse)
async def candidates_generate(
    request: Request,
    payload: CandidateGenerateRequest,
) -> CandidateGenerateResponse:
    gen = get_generator(payload.name)
    if gen is None:
        raise HTTPException(status_code=404, detail=f"Unknown generator: {payload.name}")

    pipeline = get_pipeline(request)
    require_embeddings(pipeline)

    try:
        result = await gen.generate(pipeline.embeddings, num_candidates=payload.num_candidates)
    except Exception as exc:
        logger.exception("Candidate generator '%s' failed", payload.name)
        raise HTTPException(
            status_code=502,
            detail=f"Generator '{payload.name}' failed",
        ) from exc

    candidates = result.candidates
    if payload.query_text is not None:
        query_embedding = await pipeline.embeddings.get_embedding(payload.query_text)
        candidates = rank_by_preview(query_embedding, candidates)

    return CandidateGenerateResponse(candidates=candidates)
