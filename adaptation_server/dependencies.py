"""
Dependency injection providers for the Adaptation Survival server.

Route handlers receive services through these functions instead of
reaching into app.state, so tests can override any of them with
app.dependency_overrides.
"""

from fastapi import Depends, Request

from .container import ApplicationContainer
from .database import DatabaseManager
from .persistence.repositories import CreatureRepository, EnvironmentRepository, SimulationEventRepository
from .services.simulation_engine import SimulationEngine
from .storage.blob_store import BlobStore


def get_container(request: Request) -> ApplicationContainer:
    """
    Get the application container from request state.

    Raises:
        RuntimeError: If the lifespan did not initialize a container
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError(
            "ApplicationContainer not found in app.state - ensure container is initialized in lifespan context"
        )
    return container


def _require(service, name: str):
    if service is None:
        raise RuntimeError(f"{name} not initialized in container")
    return service


def get_database_manager(container: ApplicationContainer = Depends(get_container)) -> DatabaseManager:
    return _require(container.database_manager, "DatabaseManager")


def get_blob_store(container: ApplicationContainer = Depends(get_container)) -> BlobStore:
    return _require(container.blob_store, "BlobStore")


def get_creature_repository(container: ApplicationContainer = Depends(get_container)) -> CreatureRepository:
    return _require(container.creature_repository, "CreatureRepository")


def get_environment_repository(container: ApplicationContainer = Depends(get_container)) -> EnvironmentRepository:
    return _require(container.environment_repository, "EnvironmentRepository")


def get_event_repository(container: ApplicationContainer = Depends(get_container)) -> SimulationEventRepository:
    return _require(container.event_repository, "SimulationEventRepository")


def get_simulation_engine(container: ApplicationContainer = Depends(get_container)) -> SimulationEngine:
    return _require(container.simulation_engine, "SimulationEngine")
