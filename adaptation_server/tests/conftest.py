"""
Test configuration and fixtures for the Adaptation Survival test suite.

Environment variables are set before any package import so that module-level
configuration loading sees the test database and blob token.
"""

import os
import random
from collections.abc import AsyncGenerator, Generator

import pytest

os.environ.setdefault("SERVER_ENVIRONMENT", "test")
os.environ.setdefault("SERVER_HOST", "127.0.0.1")
os.environ.setdefault("SERVER_PORT", "54731")
os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_LEVEL", "WARNING")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BLOB_READ_WRITE_TOKEN"] = "test-blob-token"

# Imports must come after environment variables to prevent config loading failures
import httpx  # noqa: E402

from adaptation_server.app.factory import create_app  # noqa: E402
from adaptation_server.config import get_config, reset_config  # noqa: E402
from adaptation_server.config.models import AppConfig  # noqa: E402
from adaptation_server.container import ApplicationContainer  # noqa: E402
from adaptation_server.database import DatabaseManager  # noqa: E402
from adaptation_server.persistence.repositories import (  # noqa: E402
    CreatureCreateParams,
    CreatureRepository,
    EnvironmentRepository,
    SimulationEventRepository,
)
from adaptation_server.storage.blob_store import BlobStore  # noqa: E402

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset config singleton before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def app_config() -> AppConfig:
    """Fresh configuration read from the test environment."""
    return get_config()


@pytest.fixture
async def database_manager(app_config: AppConfig) -> AsyncGenerator[DatabaseManager, None]:
    """In-memory sqlite database with the schema created; private to one test."""
    manager = DatabaseManager(app_config.database)
    await manager.init_db()
    yield manager
    await manager.close()


@pytest.fixture
def session_maker(database_manager: DatabaseManager):
    return database_manager.get_session_maker()


@pytest.fixture
def blob_store(session_maker, app_config: AppConfig) -> BlobStore:
    return BlobStore(session_maker, app_config.blob_store)


@pytest.fixture
def creature_repository(session_maker) -> CreatureRepository:
    return CreatureRepository(session_maker, rng=random.Random(1234))


@pytest.fixture
def environment_repository(session_maker) -> EnvironmentRepository:
    return EnvironmentRepository(session_maker)


@pytest.fixture
def event_repository(session_maker) -> SimulationEventRepository:
    return SimulationEventRepository(session_maker)


@pytest.fixture
async def container(app_config: AppConfig) -> AsyncGenerator[ApplicationContainer, None]:
    """Fully initialized container over its own in-memory database."""
    app_container = ApplicationContainer(config=app_config)
    await app_container.initialize()
    yield app_container
    await app_container.shutdown()


@pytest.fixture
def app(container: ApplicationContainer, app_config: AppConfig):
    return create_app(config=app_config, container=container)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app in-process; the container is already initialized."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def creature_params(
    name: str = "Sand Glider",
    environment: str = "desert",
    survival_chance: int | None = None,
    image_id: str | None = None,
) -> CreatureCreateParams:
    return CreatureCreateParams(
        name=name,
        adaptation_type="structural",
        environment=environment,
        stat_bonuses=["agility", "endurance"],
        stat_drawback="strength",
        image_id=image_id,
        survival_chance=survival_chance,
    )


@pytest.fixture
def make_creature(creature_repository: CreatureRepository):
    """Factory inserting a creature through the standalone repository fixture."""

    async def _make(**kwargs):
        return await creature_repository.create_creature(creature_params(**kwargs))

    return _make


@pytest.fixture
def seed_creature(container: ApplicationContainer):
    """Factory inserting a creature into the database behind the app client."""

    async def _seed(**kwargs):
        return await container.creature_repository.create_creature(creature_params(**kwargs))

    return _seed


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
