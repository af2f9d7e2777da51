"""Repository modules for the async persistence layer."""

from .creature_repository import CreatureCreateParams, CreatureRepository
from .environment_repository import EnvironmentRepository
from .simulation_event_repository import SimulationEventRepository

__all__ = [
    "CreatureCreateParams",
    "CreatureRepository",
    "EnvironmentRepository",
    "SimulationEventRepository",
]
