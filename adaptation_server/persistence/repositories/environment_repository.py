"""
Environment repository for async persistence operations.

Environments are reference data: a fixed default set is seeded into an
empty table and the application never deletes them.
"""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...exceptions import DatabaseError
from ...models.environment import DEFAULT_ENVIRONMENTS, Environment
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


class EnvironmentRepository:
    """Repository for environment persistence operations."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._logger = get_logger(__name__)

    async def ensure_default_environments(self) -> bool:
        """
        Seed the default environments if the table is empty.

        Idempotent: a non-empty table is never reseeded. Two concurrent
        seeders racing on an empty table collide on the unique id column;
        the loser's insert is rolled back and treated as already seeded.

        Returns:
            bool: True if this call inserted the defaults

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context()
        context.metadata["operation"] = "ensure_default_environments"

        try:
            async with self._session_maker() as session:
                count = (await session.execute(select(func.count()).select_from(Environment))).scalar_one()
                if count:
                    return False
                session.add_all(Environment(**environment) for environment in DEFAULT_ENVIRONMENTS)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    self._logger.info("Default environments seeded concurrently; skipping")
                    return False
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error seeding environments: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to seed environments",
                operation="ensure_default_environments",
                table="environments",
            )

        self._logger.info("Seeded default environments", environment_ids=[env["id"] for env in DEFAULT_ENVIRONMENTS])
        return True

    async def list_environments(self) -> list[Environment]:
        """
        List all environments in insertion order, seeding defaults on an empty table.

        Raises:
            DatabaseError: If database operation fails
        """
        await self.ensure_default_environments()

        context = create_error_context()
        context.metadata["operation"] = "list_environments"
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(Environment).order_by(Environment.pk))
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error listing environments: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to fetch environments",
                operation="list_environments",
                table="environments",
            )

    async def get_environment(self, environment_id: str) -> Environment | None:
        """Get an environment by its string key."""
        context = create_error_context()
        context.metadata["operation"] = "get_environment"
        context.metadata["environment_id"] = environment_id
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(Environment).where(Environment.id == environment_id))
                return result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving environment '{environment_id}': {e}",
                context=context,
                details={"environment_id": environment_id, "error": str(e)},
                user_friendly="Failed to retrieve environment",
                operation="get_environment",
                table="environments",
            )

    async def count_environments(self) -> int:
        """Count stored environments without seeding."""
        context = create_error_context()
        context.metadata["operation"] = "count_environments"
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(func.count()).select_from(Environment))
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database error counting environments: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to count environments",
                operation="count_environments",
                table="environments",
            )
