"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from api.service import TopicService


def get_topic_service(request: Request) -> TopicService:
    """Service bound to the store the application lifespan created (or None)."""
    return TopicService(getattr(request.app.state, "store", None))
