"""
SQLAlchemy models for the Adaptation Survival server.

Importing this package registers every table on the shared metadata.
"""

from .base import Base
from .creature import AdaptationType, Creature, Stat
from .environment import DEFAULT_ENVIRONMENTS, Environment
from .simulation_event import SimulationEvent
from .stored_image import StoredImage

__all__ = [
    "AdaptationType",
    "Base",
    "Creature",
    "DEFAULT_ENVIRONMENTS",
    "Environment",
    "SimulationEvent",
    "Stat",
    "StoredImage",
]
