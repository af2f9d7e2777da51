"""
Simulation and environment API schemas.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SimulationRequest(BaseModel):
    """
    Request model for running a simulation.

    creatureIds is typed loosely so that malformed identifiers reach the
    engine, which rejects them with a domain validation error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    environment_id: str = Field(..., description="Environment the event strikes")
    creature_ids: list[Any] = Field(..., description="Candidate creature ids")


class SimulationResponse(BaseModel):
    """Response model for a simulation run."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "event": "Food shortage",
                "survivors": ["3f2b8c1e-6d0a-4f6e-9a55-2c1d7b9e4a10"],
                "extinctCount": 1,
            }
        },
    )

    event: str = Field(..., description="Event type drawn for this run")
    survivors: list[str] = Field(default_factory=list, description="Ids of surviving creatures")
    extinct_count: int = Field(..., ge=0, description="Number of evaluated creatures that went extinct")


class SimulationEventData(BaseModel):
    """Recorded simulation event."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    environment_id: str
    event_type: str
    description: str
    survivors: list[str] = Field(default_factory=list)
    extinct_count: int
    created_at: str | None = None


class SimulationEventListResponse(BaseModel):
    """Response model for listing recorded events."""

    events: list[SimulationEventData]


class EnvironmentData(BaseModel):
    """Environment as returned by the API."""

    id: str = Field(..., description="Stable environment key")
    name: str
    description: str


class EnvironmentListResponse(BaseModel):
    """Response model for listing environments."""

    environments: list[EnvironmentData]
