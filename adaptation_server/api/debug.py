"""
Diagnostics endpoints: database debug summary and liveness check.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..container import ApplicationContainer
from ..dependencies import get_container
from ..error_types import ErrorMessages
from ..exceptions import DatabaseError
from ..schemas.image import DebugResponse, HealthResponse
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

debug_router = APIRouter(tags=["diagnostics"])


@debug_router.get("/debug", response_model=DebugResponse)
async def debug_database(container: ApplicationContainer = Depends(get_container)):
    """
    Report database connectivity and row counts.

    Counting environments does not seed them, so a fresh database reports
    zero until the first listing or startup seeding.
    """
    try:
        await container.database_manager.ping()
        environment_count = await container.environment_repository.count_environments()
        creature_count = await container.creature_repository.count_creatures()
    except DatabaseError as e:
        logger.error("Database debug failed", error=e.message)
        return JSONResponse(
            status_code=500,
            content={"connected": False, "error": ErrorMessages.DEBUG_FAILED, "message": e.message},
        )

    return {"connected": True, "environmentCount": environment_count, "creatureCount": creature_count}


@debug_router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return {"status": "ok"}
