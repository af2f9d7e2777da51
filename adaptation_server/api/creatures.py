"""
Creature API endpoints.

Handles listing, creating and deleting creatures. Deleting a creature also
removes its uploaded image on a best-effort basis.
"""

from fastapi import APIRouter, Depends, Query, Request, status

from ..dependencies import get_blob_store, get_creature_repository
from ..error_types import ErrorMessages
from ..exceptions import DatabaseError, LoggedHTTPException
from ..persistence.repositories.creature_repository import CreatureCreateParams, CreatureRepository
from ..schemas.creature import CreatureCreate, CreatureListResponse, CreatureResponse, DeleteResponse
from ..storage.blob_store import BlobStore
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)

creature_router = APIRouter(prefix="/creatures", tags=["creatures"])


@creature_router.get("", response_model=CreatureListResponse)
async def list_creatures(
    request: Request,
    environment: str | None = Query(default=None, description="Only creatures living in this environment"),
    repository: CreatureRepository = Depends(get_creature_repository),
):
    """List creatures, newest first, optionally filtered by environment."""
    try:
        creatures = await repository.list_creatures(environment=environment or None)
    except DatabaseError as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "list_creatures"
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.FETCH_CREATURES_FAILED, context=context) from e

    return {"creatures": [creature.to_dict() for creature in creatures]}


@creature_router.post("", status_code=status.HTTP_201_CREATED, response_model=CreatureResponse)
async def create_creature(
    request: Request,
    payload: CreatureCreate,
    repository: CreatureRepository = Depends(get_creature_repository),
):
    """
    Create a creature.

    The survival chance is drawn by the server; any value sent by the client
    is ignored.
    """
    params = CreatureCreateParams(
        name=payload.name,
        adaptation_type=payload.adaptation_type.value,
        environment=payload.environment,
        adaptation_description=payload.adaptation_description,
        stat_bonuses=[stat.value for stat in payload.stat_bonuses or []],
        stat_drawback=payload.stat_drawback.value if payload.stat_drawback else "",
        image_url=payload.image_url,
        image_id=payload.image_id,
    )
    try:
        creature = await repository.create_creature(params)
    except DatabaseError as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "create_creature"
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.CREATE_CREATURE_FAILED, context=context) from e

    return {"creature": creature.to_dict()}


@creature_router.delete("", include_in_schema=False)
async def delete_creature_without_id(request: Request):
    """Reject deletes that do not name a creature."""
    context = create_context_from_request(request)
    raise LoggedHTTPException(status_code=400, detail=ErrorMessages.MISSING_CREATURE_ID, context=context)


@creature_router.delete("/{creature_id}", response_model=DeleteResponse)
async def delete_creature(
    creature_id: str,
    request: Request,
    repository: CreatureRepository = Depends(get_creature_repository),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete a creature and, best-effort, its uploaded image."""
    context = create_context_from_request(request)
    context.metadata["creature_id"] = creature_id

    if not creature_id.strip():
        raise LoggedHTTPException(status_code=400, detail=ErrorMessages.MISSING_CREATURE_ID, context=context)

    try:
        deleted = await repository.delete_creature(creature_id, blob_store=blob_store)
    except DatabaseError as e:
        context.metadata["operation"] = "delete_creature"
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.DELETE_CREATURE_FAILED, context=context) from e

    if not deleted:
        raise LoggedHTTPException(status_code=404, detail=ErrorMessages.CREATURE_NOT_FOUND, context=context)

    return {"success": True, "message": "Creature deleted successfully"}
