from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    model_status: str | None = None


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck(request: Request):
    pipeline = getattr(request.app.state, "pipeline", None)
    model_status = pipeline.status.status if pipeline is not None else None
    return {"status": "ok", "model_status": model_status}
