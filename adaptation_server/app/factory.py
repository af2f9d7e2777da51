"""
FastAPI application factory for the Adaptation Survival server.

This module handles FastAPI app creation, middleware configuration,
and router registration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..api import creature_router, debug_router, environment_router, image_router, simulation_router
from ..config import get_config
from ..config.models import AppConfig
from ..container import ApplicationContainer
from ..middleware.error_handling_middleware import register_error_handlers
from ..middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from ..structured_logging.enhanced_logging_config import get_logger
from .lifespan import lifespan

logger = get_logger(__name__)


def create_app(config: AppConfig | None = None, container: ApplicationContainer | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration (loaded from the environment when omitted)
        container: Pre-built container; the lifespan builds one when omitted

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    if config is None:
        config = container.config if container is not None and container.config is not None else get_config()

    app = FastAPI(
        title="Adaptation Survival API",
        description="Design creatures, place them in environments and simulate which survive",
        version=__version__,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    cors = config.cors
    logger.info(
        "CORS configuration",
        allow_origins=cors.allow_origins,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
        allow_credentials=cors.allow_credentials,
        max_age=cors.max_age,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allow_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=cors.max_age,
    )
    # Added last so it wraps CORS and every route
    app.add_middleware(RequestIdMiddleware)

    # Include details in development, hide in production
    register_error_handlers(app, include_details=not config.server.is_production)

    app.include_router(creature_router)
    app.include_router(environment_router)
    app.include_router(simulation_router)
    app.include_router(image_router)
    app.include_router(debug_router)

    return app
