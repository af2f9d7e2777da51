"""Domain services for the Adaptation Survival server."""

from .simulation_engine import EVENT_TYPES, SimulationEngine, SimulationResult

__all__ = ["EVENT_TYPES", "SimulationEngine", "SimulationResult"]
