"""Aggregate statistics endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from api.deps import get_topic_service
from api.service import TopicService
from common.model import CategoryCount

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/categories")
async def get_category_stats(
    service: TopicService = Depends(get_topic_service),
) -> List[CategoryCount]:
    """Count topics per category, largest categories first."""
    return await run_in_threadpool(service.category_stats)
