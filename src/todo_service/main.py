"""
Application factory.

    uvicorn todo_service.main:app

`create_app()` installs logging, the request-id middleware, the problem+json
exception handlers and the task router. The lifespan creates the schema on
startup (when DB_CREATE_SCHEMA is on) and disposes the engine on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.v1 import register_exception_handlers, tasks_router
from .config import Settings, get_settings
from .core.logging import RequestIDMiddleware, setup_logging
from .database.session import dispose_engine, init_models
from .utils.logging import get_project_version

logger = logging.getLogger(__name__)

openapi_tags = [
    {
        "name": "Tasks operations",
        "description": "Defines the endpoints to handle task related requests",
    },
]


def create_app(settings: Settings | None = None) -> FastAPI:
    # `settings` drives logging, routing and the lifespan; the engine always
    # reads the process-wide get_settings()
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app.startup", extra={"env": settings.ENV, "api_prefix": settings.API_PREFIX})
        if settings.DB_CREATE_SCHEMA:
            await init_models()
        try:
            yield
        finally:
            await dispose_engine()
            logger.info("app.shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Create, read, update and delete tasks.",
        version=get_project_version(),
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(tasks_router, prefix=settings.API_PREFIX)

    return app


app = create_app()
