"""
Creature API request and response schemas.

Field names on the wire are camelCase; the models accept and emit the
aliases while exposing snake_case attributes to Python code.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.creature import AdaptationType, Stat

REQUIRED_STAT_BONUSES = 2


class CreatureCreate(BaseModel):
    """Request model for creature creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=200, description="Creature name")
    adaptation_type: AdaptationType = Field(..., description="Kind of adaptation")
    environment: str = Field(..., min_length=1, max_length=64, description="Environment id the creature lives in")
    adaptation_description: str = Field(default="", description="Free-text description of the adaptation")
    stat_bonuses: list[Stat] | None = Field(default=None, description="Exactly two distinct boosted stats")
    stat_drawback: Stat | None = Field(default=None, description="Stat weakened by the adaptation")
    image_url: str | None = Field(default=None, description="Image URL; a placeholder is used when absent")
    image_id: str | None = Field(default=None, description="Blob store id of an uploaded image")

    @field_validator("stat_bonuses")
    @classmethod
    def validate_stat_bonuses(cls, v: list[Stat] | None) -> list[Stat] | None:
        """Require exactly two different stats when bonuses are given."""
        if v is None:
            return v
        if len(v) != REQUIRED_STAT_BONUSES or len(set(v)) != REQUIRED_STAT_BONUSES:
            raise ValueError("statBonuses must name exactly two different stats")
        return v

    @field_validator("adaptation_description", mode="before")
    @classmethod
    def null_description_is_empty(cls, v: Any) -> Any:
        """Accept null as an empty description."""
        return "" if v is None else v

    @field_validator("stat_drawback", "image_url", "image_id", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        """Treat empty strings from form submissions as not provided."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CreatureData(BaseModel):
    """Creature as returned by the API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f2b8c1e-6d0a-4f6e-9a55-2c1d7b9e4a10",
                "name": "Sand Glider",
                "adaptationType": "structural",
                "adaptationDescription": "Wide membranes for gliding over dunes",
                "statBonuses": ["agility", "endurance"],
                "statDrawback": "strength",
                "environment": "desert",
                "imageUrl": "/placeholder.svg?height=100&width=100",
                "imageId": "",
                "survivalChance": 64,
                "createdAt": "2024-05-01T12:00:00+00:00",
            }
        },
    )

    id: str = Field(..., description="Creature id")
    name: str
    adaptation_type: str
    adaptation_description: str = ""
    stat_bonuses: list[str] = Field(default_factory=list)
    stat_drawback: str = ""
    environment: str
    image_url: str
    image_id: str = ""
    survival_chance: int = Field(..., ge=0, le=100)
    created_at: str | None = None


class CreatureListResponse(BaseModel):
    """Response model for listing creatures."""

    creatures: list[CreatureData] = Field(..., description="Creatures, newest first")


class CreatureResponse(BaseModel):
    """Response model for a created creature."""

    creature: CreatureData


class DeleteResponse(BaseModel):
    """Response model for successful deletions."""

    success: bool = True
    message: str
