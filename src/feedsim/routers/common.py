"""Helpers shared by the routers."""

from fastapi import HTTPException, Request

from ..lib.pipeline import SemanticPipeline


def get_pipeline(request: Request) -> SemanticPipeline:
    """Return the application-scoped pipeline created in the lifespan.

    Tests set ``app.state.pipeline`` to a pipeline built with a stub embed
    function.
    """
    return request.app.state.pipeline


def require_embeddings(pipeline: SemanticPipeline) -> None:
    """Raise 503 unless the embedding model is loaded."""
    if not pipeline.embeddings.is_ready:
        raise HTTPException(status_code=503, detail="Embedding model not initialized")
