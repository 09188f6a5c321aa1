"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, uvicorn, audit_assistant.api, audit_assistant.observability, audit_assistant.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from audit_assistant import __version__
from audit_assistant.api import api_router
from audit_assistant.api.deps.dependencies import get_service_cache
from audit_assistant.boundary.db import dispose_engine, init_models
from audit_assistant.configs import get_settings
from audit_assistant.observability.logger import configure_logging
from audit_assistant.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup configures logging and creates missing tables. Shutdown drops
    every live conversation handle and disposes the database engine.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    try:
        await init_models()
    except Exception as e:
        logger.exception("Failed to initialize database", extra={"error": str(e)})
        raise

    if not settings.gemini.api_key:
        logger.warning("GEMINI_API_KEY not set; chat and analysis endpoints will return 503")

    logger.info("Application startup complete")

    yield

    get_service_cache().clear()
    await dispose_engine()
    logger.info("Application shutdown: session registry cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Compliance Audit Assistant API",
        description="AI-assisted audit guidance with grounded, resumable chat sessions",
        version=__version__,
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "audit_assistant.main:app",
        host="localhost",
        port=6060,
        reload=get_settings().debug,
    )
