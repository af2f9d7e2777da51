"""
Environment API endpoints.
"""

from fastapi import APIRouter, Depends, Request

from ..dependencies import get_environment_repository
from ..error_types import ErrorMessages
from ..exceptions import DatabaseError, LoggedHTTPException
from ..persistence.repositories.environment_repository import EnvironmentRepository
from ..schemas.simulation import EnvironmentListResponse
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)

environment_router = APIRouter(prefix="/environments", tags=["environments"])


@environment_router.get("", response_model=EnvironmentListResponse)
async def list_environments(
    request: Request,
    repository: EnvironmentRepository = Depends(get_environment_repository),
):
    """List environments; the five defaults are seeded first if the table is empty."""
    try:
        environments = await repository.list_environments()
    except DatabaseError as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "list_environments"
        raise LoggedHTTPException(
            status_code=500, detail=ErrorMessages.FETCH_ENVIRONMENTS_FAILED, context=context
        ) from e

    return {"environments": [environment.to_dict() for environment in environments]}
