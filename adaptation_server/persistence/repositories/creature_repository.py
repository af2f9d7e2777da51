"""
Creature repository for async persistence operations.

This module provides async database operations for creature CRUD
using SQLAlchemy ORM.
"""

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...exceptions import DatabaseError
from ...models.creature import PLACEHOLDER_CREATURE_IMAGE, Creature
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise
from ...utils.id_utils import normalize_identifier

if TYPE_CHECKING:
    from ...storage.blob_store import BlobStore

logger = get_logger(__name__)

DEFAULT_SURVIVAL_CHANCE_RANGE = (50, 80)


@dataclass
class CreatureCreateParams:
    """Fields supplied by the caller when creating a creature."""

    name: str
    adaptation_type: str
    environment: str
    adaptation_description: str = ""
    stat_bonuses: list[str] = field(default_factory=list)
    stat_drawback: str = ""
    image_url: str | None = None
    image_id: str | None = None
    survival_chance: int | None = None


class CreatureRepository:
    """
    Repository for creature persistence operations.

    Handles creature listing, creation and the creature-then-image deletion
    sequence.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        survival_chance_range: tuple[int, int] = DEFAULT_SURVIVAL_CHANCE_RANGE,
        rng: random.Random | None = None,
    ):
        """
        Initialize the creature repository.

        Args:
            session_maker: Shared async session maker
            survival_chance_range: Inclusive bounds for survival chances drawn at creation
            rng: Random source for survival chances (defaults to an unseeded random.Random)
        """
        self._session_maker = session_maker
        self._survival_chance_range = survival_chance_range
        self._rng = rng or random.Random()
        self._logger = get_logger(__name__)

    def draw_survival_chance(self) -> int:
        """Draw a survival chance uniformly from the configured inclusive range."""
        low, high = self._survival_chance_range
        return self._rng.randint(low, high)

    async def list_creatures(self, environment: str | None = None) -> list[Creature]:
        """
        List creatures newest first.

        Args:
            environment: Restrict to creatures assigned to this environment id

        Returns:
            list[Creature]: Creatures ordered by creation time, newest first

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context()
        context.metadata["operation"] = "list_creatures"
        context.metadata["environment"] = environment

        try:
            async with self._session_maker() as session:
                stmt = select(Creature).order_by(Creature.created_at.desc())
                if environment:
                    stmt = stmt.where(Creature.environment == environment)
                result = await session.execute(stmt)
                creatures = list(result.scalars().all())
                self._logger.debug("Loaded creatures", creature_count=len(creatures), environment=environment)
                return creatures
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error listing creatures: {e}",
                context=context,
                details={"environment": environment, "error": str(e)},
                user_friendly="Failed to fetch creatures",
                operation="list_creatures",
                table="creatures",
            )

    async def get_creature(self, creature_id: str) -> Creature | None:
        """
        Get a creature by ID.

        Returns:
            Creature | None: The creature, or None if the id is unknown or malformed

        Raises:
            DatabaseError: If database operation fails
        """
        lookup_id = normalize_identifier(creature_id)
        if lookup_id is None:
            return None

        context = create_error_context()
        context.metadata["operation"] = "get_creature"
        context.metadata["creature_id"] = creature_id

        try:
            async with self._session_maker() as session:
                return await session.get(Creature, lookup_id)
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving creature '{creature_id}': {e}",
                context=context,
                details={"creature_id": creature_id, "error": str(e)},
                user_friendly="Failed to retrieve creature",
                operation="get_creature",
                table="creatures",
            )

    async def get_creatures_in_environment(self, creature_ids: Sequence[str], environment_id: str) -> list[Creature]:
        """
        Fetch creatures whose id is in creature_ids AND whose environment matches.

        Ids that do not exist or belong to another environment are silently
        left out.

        Raises:
            DatabaseError: If database operation fails
        """
        normalized = dict.fromkeys(map(normalize_identifier, creature_ids))
        ids = [lookup_id for lookup_id in normalized if lookup_id is not None]
        if not ids:
            return []

        context = create_error_context()
        context.metadata["operation"] = "get_creatures_in_environment"
        context.metadata["environment_id"] = environment_id

        try:
            async with self._session_maker() as session:
                stmt = select(Creature).where(Creature.id.in_(ids), Creature.environment == environment_id)
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error fetching creatures for environment '{environment_id}': {e}",
                context=context,
                details={"environment_id": environment_id, "creature_count": len(ids), "error": str(e)},
                user_friendly="Failed to fetch creatures",
                operation="get_creatures_in_environment",
                table="creatures",
            )

    async def create_creature(self, params: CreatureCreateParams) -> Creature:
        """
        Insert a creature with server-assigned id, createdAt and survival chance.

        The survival chance is only taken from params when a caller inside the
        server supplies one explicitly; otherwise it is drawn from the range.

        Raises:
            DatabaseError: If database operation fails
        """
        survival_chance = params.survival_chance if params.survival_chance is not None else self.draw_survival_chance()
        creature = Creature(
            id=str(uuid4()),
            name=params.name,
            adaptation_type=params.adaptation_type,
            adaptation_description=params.adaptation_description or "",
            stat_bonuses=list(params.stat_bonuses or []),
            stat_drawback=params.stat_drawback or "",
            environment=params.environment,
            image_url=params.image_url or PLACEHOLDER_CREATURE_IMAGE,
            image_id=params.image_id or None,
            survival_chance=survival_chance,
            created_at=datetime.now(UTC),
        )

        context = create_error_context()
        context.metadata["operation"] = "create_creature"
        context.metadata["environment"] = params.environment

        try:
            async with self._session_maker() as session:
                session.add(creature)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error creating creature '{params.name}': {e}",
                context=context,
                details={"name": params.name, "error": str(e)},
                user_friendly="Failed to create creature",
                operation="create_creature",
                table="creatures",
            )

        self._logger.info(
            "Creature created",
            creature_id=creature.id,
            environment=creature.environment,
            survival_chance=creature.survival_chance,
        )
        return creature

    async def delete_creature(self, creature_id: str, blob_store: "BlobStore | None" = None) -> bool:
        """
        Delete a creature and, best-effort, its owned image.

        Steps: fetch the creature; if it owns an image ask the blob store to
        delete it and ignore the outcome; then remove the creature row. The
        steps are not atomic, so a crash between them can leave an orphaned
        image or, if the image went first, a creature whose image is gone.

        Returns:
            bool: True if a creature record was removed, False if none existed

        Raises:
            DatabaseError: If database operation fails
        """
        creature = await self.get_creature(creature_id)
        if creature is None:
            self._logger.info("Creature not found for deletion", creature_id=creature_id)
            return False

        if creature.image_id and blob_store is not None:
            image_deleted = await blob_store.delete(creature.image_id)
            if not image_deleted:
                self._logger.warning(
                    "Owned image could not be deleted; continuing with creature deletion",
                    creature_id=creature_id,
                    image_id=creature.image_id,
                )

        context = create_error_context()
        context.metadata["operation"] = "delete_creature"
        context.metadata["creature_id"] = creature_id

        try:
            async with self._session_maker() as session:
                result = await session.execute(delete(Creature).where(Creature.id == creature.id))
                await session.commit()
                deleted = (result.rowcount or 0) > 0
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error deleting creature '{creature_id}': {e}",
                context=context,
                details={"creature_id": creature_id, "error": str(e)},
                user_friendly="Failed to delete creature",
                operation="delete_creature",
                table="creatures",
            )

        if deleted:
            self._logger.info("Creature deleted", creature_id=creature_id)
        return deleted

    async def count_creatures(self) -> int:
        """Count stored creatures."""
        context = create_error_context()
        context.metadata["operation"] = "count_creatures"
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(func.count()).select_from(Creature))
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error counting creatures: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to count creatures",
                operation="count_creatures",
                table="creatures",
            )
