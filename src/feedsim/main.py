import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .lib.pipeline import SemanticPipeline
from .routers import analysis, candidates, health, ml
from .security import verify_api_key
from .settings import get_log_level, warmup_on_startup

logging.basicConfig(level=get_log_level())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pipeline per process; routers read it from app.state.
    pipeline = SemanticPipeline.create()
    app.state.pipeline = pipeline
    if warmup_on_startup():
        try:
            await pipeline.initialize()
        except Exception:
            logger.exception("Model warm-up failed; POST /ml/initialize to retry")
    yield
    pipeline.reset()


app = FastAPI(
    title="feedsim API",
    description="Semantic pipeline behind the recommendation-pipeline visualizer",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(ml.router)
app.include_router(analysis.router)
app.include_router(candidates.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "feedsim API"}
