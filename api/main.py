"""BINAH topic API application.

Run with: uvicorn api.main:app --port 3001  (or the binah-api script)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.handlers import register_exception_handlers
from api.routes.router import router as api_router
from common.database import TopicStore
from common.log import setup_logging
from common.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def add_cors_middleware(app: FastAPI, settings: Settings) -> None:
    if settings.is_production:
        allow_origins = settings.allowed_origins
        allow_origin_regex = settings.cors_origin_regex
    else:
        allow_origins = ["*"]
        allow_origin_regex = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database_configured:
            app.state.store = TopicStore.from_settings(settings)
        else:
            logger.warning(
                "No database configured (POSTGRES_HOST unset): reads return "
                "empty results and writes are rejected"
            )
            app.state.store = None

        yield

        if app.state.store is not None:
            app.state.store.close()

    app = FastAPI(title="BINAH API", version=VERSION, lifespan=lifespan)
    app.state.store = None

    add_cors_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["system"])
    async def root():
        return {
            "message": "BINAH API Online",
            "version": VERSION,
            "endpoints": ["/api/health", "/api/topics", "/api/stats/categories"],
        }

    return app


setup_logging(default_settings.log_level)
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=default_settings.api_host, port=default_settings.api_port)
