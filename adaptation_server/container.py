"""
Dependency injection container for the Adaptation Survival server.

The container owns every long-lived service: the database manager (and
through it the shared connection pool), the blob store, the repositories
and the simulation engine. It is built once in the application lifespan
and stored on app.state.container.
"""

import random
from typing import Any

from anyio import Lock

from .config import get_config
from .config.models import AppConfig
from .database import DatabaseManager
from .persistence.repositories import CreatureRepository, EnvironmentRepository, SimulationEventRepository
from .services.simulation_engine import SimulationEngine
from .storage.blob_store import BlobStore
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ApplicationContainer:  # pylint: disable=too-many-instance-attributes  # Reason: DI container holds every service instance
    """
    Dependency Injection Container for the Adaptation Survival application.

    Services are not created in __init__; call initialize() from the
    lifespan and shutdown() when the application stops.
    """

    def __init__(self, config: AppConfig | None = None, rng: random.Random | None = None) -> None:
        self.config: AppConfig | None = config
        self.rng = rng
        self.database_manager: DatabaseManager | None = None
        self.blob_store: BlobStore | None = None
        self.creature_repository: CreatureRepository | None = None
        self.environment_repository: EnvironmentRepository | None = None
        self.event_repository: SimulationEventRepository | None = None
        self.simulation_engine: SimulationEngine | None = None

        self._initialized = False
        self._initialization_lock = Lock()

        logger.info("ApplicationContainer created (not yet initialized)")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Create services, the database schema and the default environments.

        Safe to call more than once; later calls are no-ops.

        Raises:
            DatabaseError: If the schema cannot be created or seeding fails
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            if self.config is None:
                self.config = get_config()
            config = self.config

            self.database_manager = DatabaseManager(config.database)
            await self.database_manager.init_db()
            session_maker = self.database_manager.get_session_maker()

            self.blob_store = BlobStore(session_maker, config.blob_store)
            self.creature_repository = CreatureRepository(
                session_maker,
                survival_chance_range=(config.simulation.survival_chance_min, config.simulation.survival_chance_max),
                rng=self.rng,
            )
            self.environment_repository = EnvironmentRepository(session_maker)
            self.event_repository = SimulationEventRepository(session_maker)
            self.simulation_engine = SimulationEngine(self.creature_repository, self.event_repository, rng=self.rng)

            await self.environment_repository.ensure_default_environments()

            self._initialized = True
            logger.info(
                "ApplicationContainer initialized",
                blob_store_enabled=self.blob_store.enabled,
                sqlite=config.database.is_sqlite,
            )

    async def shutdown(self) -> None:
        """Dispose the database engine."""
        if self.database_manager is not None:
            await self.database_manager.close()
        self._initialized = False
        logger.info("ApplicationContainer shut down")

    def get_status(self) -> dict[str, Any]:
        return {
            "initialized": self._initialized,
            "blob_store_enabled": bool(self.blob_store and self.blob_store.enabled),
        }
