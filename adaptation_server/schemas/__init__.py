"""Pydantic request and response schemas for the HTTP API."""

from .creature import CreatureCreate, CreatureData, CreatureListResponse, CreatureResponse, DeleteResponse
from .image import DebugResponse, HealthResponse, UploadResponse
from .simulation import (
    EnvironmentData,
    EnvironmentListResponse,
    SimulationEventData,
    SimulationEventListResponse,
    SimulationRequest,
    SimulationResponse,
)

__all__ = [
    "CreatureCreate",
    "CreatureData",
    "CreatureListResponse",
    "CreatureResponse",
    "DebugResponse",
    "DeleteResponse",
    "EnvironmentData",
    "EnvironmentListResponse",
    "HealthResponse",
    "SimulationEventData",
    "SimulationEventListResponse",
    "SimulationRequest",
    "SimulationResponse",
    "UploadResponse",
]
