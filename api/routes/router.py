"""Main API router, combining all /api endpoints."""

from fastapi import APIRouter

from . import stats, system, topics


router = APIRouter(prefix="/api")

router.include_router(system.router)
router.include_router(topics.router)
router.include_router(stats.router)
