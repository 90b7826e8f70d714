"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the score and capability routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from matter_scores.main.config import get_settings
from matter_scores.main.container import app_lifespan, init_container
from matter_scores.presentation.controllers import capabilities_router, scores_router
from matter_scores.shared import (
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

# Configure logging with basic settings first - before configuration is loaded
configure_logging()

settings = get_settings()

update_logging_from_settings(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.

    Loads the registry, creates the MongoDB indexes and closes the
    connection on shutdown, all through the container's app_lifespan.
    """
    logger.info("app.startup", environment=settings.environment.value)

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = get_settings()

    init_container(settings)

    app = FastAPI(
        title=settings.service.title,
        description=settings.service.description,
        version=settings.service.version,
        debug=settings.service.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scores_router)
    app.include_router(capabilities_router)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the ``SERVICE_*`` settings."""
    import uvicorn

    settings = get_settings()
    logger.info("app.serving", host=settings.service.host, port=settings.service.port)
    uvicorn.run(
        "matter_scores.main.app:app",
        host=settings.service.host,
        port=settings.service.port,
        reload=settings.service.reload,
    )
