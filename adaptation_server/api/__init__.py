"""HTTP API routers for the Adaptation Survival server."""

from .creatures import creature_router
from .debug import debug_router
from .environments import environment_router
from .images import image_router
from .simulation import simulation_router

__all__ = ["creature_router", "debug_router", "environment_router", "image_router", "simulation_router"]
