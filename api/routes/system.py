"""Health check and schema initialization endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from api.deps import get_topic_service
from api.exceptions import BinahException
from api.service import TopicService
from common.utils import to_utc_iso

router = APIRouter(tags=["system"])


class HealthResponse(BaseModel):
    ok: bool = True
    timestamp: str = Field(..., description="Current server time (UTC, ISO-8601)")


class InitResponse(BaseModel):
    success: bool = True
    message: str


def utc_timestamp() -> str:
    return to_utc_iso(datetime.now(timezone.utc))


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse(timestamp=utc_timestamp())


@router.post("/init", response_model=InitResponse)
async def init_database(service: TopicService = Depends(get_topic_service)):
    """Create the topics table if it does not exist yet."""
    try:
        await run_in_threadpool(service.init_schema)
    except BinahException as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    return InitResponse(message="Database initialized successfully")
