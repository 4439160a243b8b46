"""Topic CRUD endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from api.deps import get_topic_service
from api.service import TopicService
from common.model import Topic, TopicWrite


router = APIRouter(prefix="/topics", tags=["topics"])


class TopicCreated(BaseModel):
    success: bool = True
    id: int = Field(..., description="Id assigned to the new topic")


class TopicChanged(BaseModel):
    success: bool = True
    affected: int = Field(..., description="Number of rows the request changed")


@router.get("")
async def list_topics(
    search: Optional[str] = Query(
        None, description="Substring matched against title, keywords and content"
    ),
    category: Optional[str] = Query(
        None, description='Exact category to filter by; "all" disables the filter'
    ),
    limit: Optional[str] = Query(None, description="Maximum number of topics"),
    service: TopicService = Depends(get_topic_service),
) -> List[Topic]:
    """List topics, newest first."""
    return await run_in_threadpool(service.list_topics, search, category, limit)


@router.get("/{topic_id}")
async def get_topic(
    topic_id: int = Path(...),
    service: TopicService = Depends(get_topic_service),
) -> Topic:
    return await run_in_threadpool(service.get_topic, topic_id)


@router.post("")
async def create_topic(
    payload: TopicWrite,
    service: TopicService = Depends(get_topic_service),
) -> TopicCreated:
    topic_id = await run_in_threadpool(service.create_topic, payload)
    return TopicCreated(id=topic_id)


@router.put("/{topic_id}")
async def update_topic(
    payload: TopicWrite,
    topic_id: int = Path(...),
    service: TopicService = Depends(get_topic_service),
) -> TopicChanged:
    """Rewrite a topic, or bump one of its counters.

    Send {"incrementView": true} or {"incrementHelpful": true} to count a view
    or a helpful vote; any other body replaces all editable fields.

    Succeeds even when no topic has this id; check "affected" to tell.
    """
    affected = await run_in_threadpool(service.update_topic, topic_id, payload)
    return TopicChanged(affected=affected)


@router.delete("/{topic_id}")
async def delete_topic(
    topic_id: int = Path(...),
    service: TopicService = Depends(get_topic_service),
) -> TopicChanged:
    """Delete a topic.

    This operation is idempotent - deleting a non-existent topic succeeds.
    """
    affected = await run_in_threadpool(service.delete_topic, topic_id)
    return TopicChanged(affected=affected)
