"""
Database configuration for the Adaptation Survival server.

This module provides the async engine, session management and schema
initialization. Initialization is LAZY: the engine is created on first use
from the DatabaseConfig the manager was built with.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .config.models import DatabaseConfig
from .exceptions import DatabaseError
from .models.base import metadata
from .structured_logging.enhanced_logging_config import get_logger
from .utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


class DatabaseManager:
    """
    Owner of the shared database engine and session maker.

    The engine is a long-lived connection pool shared by every request;
    sessions are short-lived and opened per repository call.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize the database manager."""
        self.config = config
        self.database_url: str = config.url
        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker[AsyncSession] | None = None
        self._initialized: bool = False

    def _engine_kwargs(self) -> dict[str, Any]:
        if self.config.is_sqlite:
            # A single shared connection keeps in-memory databases alive across sessions
            kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.database_url or "mode=memory" in self.database_url:
                kwargs["poolclass"] = StaticPool
            return kwargs
        return {
            "pool_pre_ping": True,
            "pool_size": self.config.pool_size,
            "max_overflow": self.config.max_overflow,
            "pool_timeout": self.config.pool_timeout,
        }

    def _initialize_database(self) -> None:
        """Create the engine and session maker from configuration."""
        if self._initialized:
            return

        self.engine = create_async_engine(self.database_url, echo=False, **self._engine_kwargs())
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._initialized = True
        logger.info(
            "Database engine created",
            dialect=self.engine.dialect.name,
            pool_type=type(self.engine.pool).__name__,
        )

    def get_engine(self) -> AsyncEngine:
        """
        Get the database engine, initializing if necessary.

        Returns:
            AsyncEngine: The database engine
        """
        if not self._initialized:
            self._initialize_database()
        assert self.engine is not None, "Database engine not initialized"
        return self.engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        """
        Get the async session maker, initializing if necessary.

        Returns:
            async_sessionmaker: The session maker
        """
        if not self._initialized:
            self._initialize_database()
        assert self.session_maker is not None, "Session maker not initialized"
        return self.session_maker

    async def init_db(self) -> None:
        """
        Create all tables registered on the shared metadata.

        Raises:
            DatabaseError: If the schema cannot be created
        """
        context = create_error_context()
        context.metadata["operation"] = "init_db"
        try:
            engine = self.get_engine()
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
            logger.info("Database schema initialized", tables=sorted(metadata.tables))
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Failed to initialize database schema: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Database initialization failed",
                operation="init_db",
            )

    async def ping(self) -> bool:
        """Run a trivial query; raises DatabaseError when the database is unreachable."""
        context = create_error_context()
        context.metadata["operation"] = "ping"
        try:
            async with self.get_session_maker()() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Database connectivity check failed: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Database unavailable",
                operation="ping",
            )

    async def close(self) -> None:
        """Close database connections."""
        if self.engine is not None:
            engine = self.engine
            try:
                await engine.dispose()
                logger.info("Database connections closed")
            except (SQLAlchemyError, RuntimeError, OSError) as e:
                logger.warning("Error disposing database engine", error=str(e), error_type=type(e).__name__)
            finally:
                self.engine = None
                self.session_maker = None
                self._initialized = False
