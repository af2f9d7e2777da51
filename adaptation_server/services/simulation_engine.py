"""
Simulation engine for environmental survival events.

A run draws one disaster for an environment and rolls every participating
creature against its stored survival chance. Each roll is independent; the
engine keeps no state between runs.
"""

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..error_types import ErrorMessages
from ..exceptions import ValidationError
from ..persistence.repositories.creature_repository import CreatureRepository
from ..persistence.repositories.simulation_event_repository import SimulationEventRepository
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.id_utils import is_valid_identifier

logger = get_logger(__name__)

EVENT_TYPES: tuple[str, ...] = (
    "Extreme weather",
    "Food shortage",
    "Predator invasion",
    "Disease outbreak",
    "Habitat destruction",
)


def describe_event(event_type: str, environment_id: str) -> str:
    return f"{event_type} in the {environment_id} environment"


@dataclass
class SimulationResult:
    """Outcome of one simulation run."""

    event_type: str
    description: str
    survivors: list[str] = field(default_factory=list)
    extinct_count: int = 0
    event_id: str | None = None

    @property
    def evaluated_count(self) -> int:
        return len(self.survivors) + self.extinct_count

    def to_dict(self) -> dict[str, Any]:
        """Response body shape: event label, surviving ids and extinct count."""
        return {
            "event": self.event_type,
            "survivors": list(self.survivors),
            "extinctCount": self.extinct_count,
        }


class SimulationEngine:
    """
    Runs survival simulations against stored creatures.

    Creatures whose id is unknown or whose environment differs from the
    requested one are excluded without error, so a run over such a set
    records an event with no survivors and no extinctions.
    """

    def __init__(
        self,
        creature_repository: CreatureRepository,
        event_repository: SimulationEventRepository,
        rng: random.Random | None = None,
    ):
        self.creature_repository = creature_repository
        self.event_repository = event_repository
        self._rng = rng or random.SystemRandom()
        self._logger = get_logger(__name__)

    def _validate(self, environment_id: Any, creature_ids: Any) -> None:
        if not isinstance(environment_id, str) or not environment_id.strip():
            raise ValidationError(
                "environmentId must be a non-empty string",
                field="environmentId",
                value=environment_id,
                user_friendly=ErrorMessages.INVALID_REQUEST_DATA,
            )
        if not isinstance(creature_ids, list | tuple) or not creature_ids:
            raise ValidationError(
                "creatureIds must be a non-empty list",
                field="creatureIds",
                user_friendly=ErrorMessages.INVALID_REQUEST_DATA,
            )
        invalid = [creature_id for creature_id in creature_ids if not is_valid_identifier(creature_id)]
        if invalid:
            raise ValidationError(
                f"creatureIds contains {len(invalid)} malformed identifier(s)",
                field="creatureIds",
                details={"invalid_ids": [str(creature_id) for creature_id in invalid]},
                user_friendly=ErrorMessages.INVALID_REQUEST_DATA,
            )

    def draw_event_type(self) -> str:
        return self._rng.choice(EVENT_TYPES)

    def survives(self, survival_chance: int) -> bool:
        """Roll in [0, 100); the creature survives when the roll is below its chance."""
        return self._rng.random() * 100 < survival_chance

    async def run(self, environment_id: str, creature_ids: Sequence[str]) -> SimulationResult:
        """
        Run one simulation and record it.

        Args:
            environment_id: Environment the event strikes
            creature_ids: Candidate creature identifiers

        Returns:
            SimulationResult: Event label, survivor ids and extinct count

        Raises:
            ValidationError: If environment_id is empty or creature_ids is not a
                non-empty list of valid identifiers
            DatabaseError: If fetching creatures or recording the event fails
        """
        self._validate(environment_id, creature_ids)

        creatures = await self.creature_repository.get_creatures_in_environment(creature_ids, environment_id)
        event_type = self.draw_event_type()

        survivors = [creature.id for creature in creatures if self.survives(creature.survival_chance)]
        extinct_count = len(creatures) - len(survivors)
        description = describe_event(event_type, environment_id)

        event = await self.event_repository.record_event(
            environment_id=environment_id,
            event_type=event_type,
            description=description,
            survivors=survivors,
            extinct_count=extinct_count,
        )

        result = SimulationResult(
            event_type=event_type,
            description=description,
            survivors=survivors,
            extinct_count=extinct_count,
            event_id=event.id,
        )
        self._logger.info(
            "Simulation completed",
            environment_id=environment_id,
            event_type=event_type,
            event_id=event.id,
            requested_count=len(creature_ids),
            evaluated_count=result.evaluated_count,
            survivor_count=len(survivors),
            extinct_count=extinct_count,
        )
        return result
