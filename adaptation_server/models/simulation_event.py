"""
Simulation event model.

One row per simulation run. `survivors` holds creature ids as plain strings;
creatures may be deleted later without touching recorded events.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SimulationEvent(Base):
    """Recorded outcome of one simulation run."""

    __tablename__ = "simulation_events"
    __table_args__ = {"extend_existing": True}

    id: Mapped[str] = mapped_column(String(length=36), primary_key=True, default=lambda: str(uuid4()))
    environment_id: Mapped[str] = mapped_column(String(length=64), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(length=64), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    survivors: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    extinct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC), index=True
    )

    def __repr__(self) -> str:
        return (
            f"<SimulationEvent(id={self.id}, environment_id='{self.environment_id}', "
            f"event_type='{self.event_type}', survivors={len(self.survivors or [])}, "
            f"extinct_count={self.extinct_count})>"
        )

    def to_dict(self) -> dict[str, Any]:
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return {
            "id": self.id,
            "environmentId": self.environment_id,
            "eventType": self.event_type,
            "description": self.description,
            "survivors": list(self.survivors or []),
            "extinctCount": self.extinct_count,
            "createdAt": created_at.isoformat() if created_at else None,
        }
