"""Application lifecycle management for the Adaptation Survival server.

Startup builds (or reuses) the ApplicationContainer, creates the schema and
seeds the default environments; shutdown disposes the database engine.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..container import ApplicationContainer
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger("adaptation_server.lifespan")

__all__ = ["lifespan"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    A container placed on app.state before startup (tests do this) is
    initialized and used as-is; otherwise a new one is built from the
    environment configuration.
    """
    logger.info("Starting Adaptation Survival server")

    container = getattr(app.state, "container", None)
    if container is None:
        container = ApplicationContainer()
        app.state.container = container
    await container.initialize()

    logger.info("Adaptation Survival server started", **container.get_status())
    try:
        yield
    finally:
        logger.info("Shutting down Adaptation Survival server")
        await container.shutdown()
        logger.info("Adaptation Survival server shutdown complete")
