"""
Simulation API endpoints.

Runs survival simulations and lists previously recorded events.
"""

from fastapi import APIRouter, Depends, Query, Request

from ..dependencies import get_event_repository, get_simulation_engine
from ..error_types import ErrorMessages
from ..exceptions import DatabaseError, LoggedHTTPException
from ..persistence.repositories.simulation_event_repository import DEFAULT_EVENT_LIMIT, SimulationEventRepository
from ..schemas.simulation import SimulationEventListResponse, SimulationRequest, SimulationResponse
from ..services.simulation_engine import SimulationEngine
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)

simulation_router = APIRouter(prefix="/simulation", tags=["simulation"])


@simulation_router.post("", response_model=SimulationResponse)
async def run_simulation(
    request: Request,
    payload: SimulationRequest,
    engine: SimulationEngine = Depends(get_simulation_engine),
):
    """
    Strike an environment with a random event and report who survived.

    Ids that are unknown or belong to another environment are left out of
    the run rather than rejected.
    """
    try:
        result = await engine.run(payload.environment_id, payload.creature_ids)
    except DatabaseError as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "run_simulation"
        context.metadata["environment_id"] = payload.environment_id
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.SIMULATION_FAILED, context=context) from e

    return result.to_dict()


@simulation_router.get("/events", response_model=SimulationEventListResponse)
async def list_simulation_events(
    request: Request,
    environment_id: str | None = Query(default=None, alias="environmentId", description="Restrict to one environment"),
    limit: int = Query(default=DEFAULT_EVENT_LIMIT, ge=1, le=500, description="Maximum number of events"),
    repository: SimulationEventRepository = Depends(get_event_repository),
):
    """List recorded simulation events, newest first."""
    try:
        events = await repository.list_events(environment_id=environment_id or None, limit=limit)
    except DatabaseError as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "list_simulation_events"
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.FETCH_EVENTS_FAILED, context=context) from e

    return {"events": [event.to_dict() for event in events]}
