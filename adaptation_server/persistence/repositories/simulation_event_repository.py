"""
Simulation event repository for async persistence operations.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...exceptions import DatabaseError
from ...models.simulation_event import SimulationEvent
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)

DEFAULT_EVENT_LIMIT = 50


class SimulationEventRepository:
    """Repository for recording and listing simulation events."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._logger = get_logger(__name__)

    async def record_event(
        self,
        environment_id: str,
        event_type: str,
        description: str,
        survivors: Sequence[str],
        extinct_count: int,
    ) -> SimulationEvent:
        """
        Persist a simulation event.

        Raises:
            DatabaseError: If database operation fails
        """
        event = SimulationEvent(
            id=str(uuid4()),
            environment_id=environment_id,
            event_type=event_type,
            description=description,
            survivors=list(survivors),
            extinct_count=extinct_count,
            created_at=datetime.now(UTC),
        )

        context = create_error_context()
        context.metadata["operation"] = "record_event"
        context.metadata["environment_id"] = environment_id

        try:
            async with self._session_maker() as session:
                session.add(event)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error recording simulation event: {e}",
                context=context,
                details={"environment_id": environment_id, "event_type": event_type, "error": str(e)},
                user_friendly="Failed to record simulation event",
                operation="record_event",
                table="simulation_events",
            )

        self._logger.info(
            "Simulation event recorded",
            event_id=event.id,
            environment_id=environment_id,
            event_type=event_type,
            survivor_count=len(event.survivors),
            extinct_count=extinct_count,
        )
        return event

    async def list_events(self, environment_id: str | None = None, limit: int = DEFAULT_EVENT_LIMIT) -> list[SimulationEvent]:
        """
        List recorded events newest first.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context()
        context.metadata["operation"] = "list_events"
        context.metadata["environment_id"] = environment_id

        try:
            async with self._session_maker() as session:
                stmt = select(SimulationEvent).order_by(SimulationEvent.created_at.desc()).limit(limit)
                if environment_id:
                    stmt = stmt.where(SimulationEvent.environment_id == environment_id)
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error listing simulation events: {e}",
                context=context,
                details={"environment_id": environment_id, "error": str(e)},
                user_friendly="Failed to fetch simulation events",
                operation="list_events",
                table="simulation_events",
            )
