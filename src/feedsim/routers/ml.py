"""ML router – model lifecycle and raw embeddings.

GET /ml/status
    Current load status (idle, loading, ready, error) with progress.

POST /ml/initialize
    Load the model and precompute category/audience tables.  Concurrent
    requests share a single load.

POST /ml/embed
    Return the 128-d unit embedding of a text, as floats and as base64 float32.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..lib.embeddings import encode_float32_b64
from ..models import MLStatus
from ..security import verify_api_key
from .common import get_pipeline, require_embeddings

router = APIRouter(tags=["ml"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


class EmbedRequest(BaseModel):
    text: str = Field(..., description="Text to embed")


class EmbedResponse(BaseModel):
    text: str
    embedding: list[float] = Field(..., description="Unit-normalized embedding")
    encoded: str = Field(..., description="Base64-encoded little-endian float32 embedding")


@router.get("/ml/status", response_model=MLStatus)
async def ml_status(request: Request) -> MLStatus:
    return get_pipeline(request).status


@router.post("/ml/initialize", response_model=MLStatus)
async def ml_initialize(request: Request) -> MLStatus:
    """Initialize the pipeline, waiting for the model to finish loading."""
    pipeline = get_pipeline(request)
    try:
        await pipeline.initialize()
    except Exception as exc:
        logger.exception("Pipeline initialization failed")
        raise HTTPException(
            status_code=502,
            detail=f"Model initialization failed: {exc}",
        ) from exc
    return pipeline.status


@router.post("/ml/embed", response_model=EmbedResponse)
async def ml_embed(request: Request, payload: EmbedRequest) -> EmbedResponse:
    pipeline = get_pipeline(request)
    require_embeddings(pipeline)

    embedding = await pipeline.embeddings.get_embedding(payload.text)
    return EmbedResponse(
        text=payload.text,
        embedding=embedding,
        encoded=encode_float32_b64(embedding),
    )
