"""
Creature model.

A creature is a user-designed organism bound to one environment. Its
survival chance is drawn once at creation and never recomputed.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

PLACEHOLDER_CREATURE_IMAGE = "/placeholder.svg?height=100&width=100"


class AdaptationType(str, Enum):
    """Kinds of adaptation a creature can declare."""

    STRUCTURAL = "structural"
    PHYSIOLOGICAL = "physiological"
    BEHAVIORAL = "behavioral"


class Stat(str, Enum):
    """Stat names used for bonuses and drawbacks."""

    STRENGTH = "strength"
    AGILITY = "agility"
    ENDURANCE = "endurance"
    INTELLIGENCE = "intelligence"
    STEALTH = "stealth"


class Creature(Base):
    """
    Creature model.

    Table: creatures. `environment` is a soft reference to Environment.id and
    `image_id` a soft reference to a StoredImage; neither is enforced by the
    database, so readers must tolerate dangling values.
    """

    __tablename__ = "creatures"
    __table_args__ = {"extend_existing": True}

    id: Mapped[str] = mapped_column(String(length=36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(length=200), nullable=False)
    adaptation_type: Mapped[str] = mapped_column(String(length=32), nullable=False)
    adaptation_description: Mapped[str] = mapped_column(Text(), nullable=False, default="")
    stat_bonuses: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    stat_drawback: Mapped[str] = mapped_column(String(length=32), nullable=False, default="")
    environment: Mapped[str] = mapped_column(String(length=64), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(Text(), nullable=False, default=PLACEHOLDER_CREATURE_IMAGE)
    image_id: Mapped[str | None] = mapped_column(String(length=36), nullable=True)
    survival_chance: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC), index=True
    )

    def __repr__(self) -> str:
        """String representation of the creature."""
        return (
            f"<Creature(id={self.id}, name='{self.name}', environment='{self.environment}', "
            f"survival_chance={self.survival_chance})>"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase field names exposed by the API."""
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return {
            "id": self.id,
            "name": self.name,
            "adaptationType": self.adaptation_type,
            "adaptationDescription": self.adaptation_description or "",
            "statBonuses": list(self.stat_bonuses or []),
            "statDrawback": self.stat_drawback or "",
            "environment": self.environment,
            "imageUrl": self.image_url,
            "imageId": self.image_id or "",
            "survivalChance": self.survival_chance,
            "createdAt": created_at.isoformat() if created_at else None,
        }
