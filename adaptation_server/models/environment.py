"""
Environment model for habitat data.

Environments are keyed by a short stable string ("marine", "desert") that
creatures reference directly.
"""

from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Environment(Base):
    """Habitat category creatures can be assigned to."""

    __tablename__ = "environments"
    __table_args__ = {"extend_existing": True}

    # Surrogate key keeps insertion order stable for listing
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(length=64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(length=100), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Environment(id='{self.id}', name='{self.name}')>"

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


DEFAULT_ENVIRONMENTS: tuple[dict[str, str], ...] = (
    {
        "id": "marine",
        "name": "Marine",
        "description": "Deep ocean environment with high pressure and limited light.",
    },
    {
        "id": "rainforest",
        "name": "Rainforest",
        "description": "Dense vegetation with high humidity and biodiversity.",
    },
    {
        "id": "tundra",
        "name": "Tundra",
        "description": "Cold environment with permafrost and limited vegetation.",
    },
    {
        "id": "desert",
        "name": "Desert",
        "description": "Arid environment with extreme temperature variations.",
    },
    {
        "id": "grassland",
        "name": "Grassland",
        "description": "Open terrain with grasses and few trees.",
    },
)
