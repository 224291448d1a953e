import asyncio
import logging
from enum import Enum
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import Executable

from nest_admin.config import ApiConfig
from nest_admin.exceptions import DatabaseUnavailable

logger = logging.getLogger(__name__)


class LogicalDatabase(str, Enum):
    """The two stores reachable from the dashboard."""
    MEMBERSHIP = "membership"
    WORLD = "world"


# Declarative bases are kept apart so each store only ever sees its own tables.
MembershipBase = declarative_base()
WorldBase = declarative_base()


def make_database_urls(cfg: ApiConfig) -> dict[LogicalDatabase, str]:
    """
    Create database URLs from configuration.

    Returns:
        Mapping of logical database to SQLAlchemy URL
    """
    return {
        LogicalDatabase.MEMBERSHIP: cfg.MEMBERSHIP_DATABASE_URL,
        LogicalDatabase.WORLD: cfg.WORLD_DATABASE_URL,
    }


class DatabaseGateway:
    """
    Owns one lazily created engine per logical database.

    Engines are created on first use under a per-database lock, so callers
    racing before the first successful connect wait on the same in-flight
    establishment instead of building extra pools. A failed establishment
    is not cached; the next call tries again.
    """

    def __init__(
        self,
        urls: Mapping[LogicalDatabase, str],
        pool_size: int = 10,
        pool_timeout: float = 30.0,
        query_timeout: float = 15.0,
    ):
        self._urls = dict(urls)
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._query_timeout = query_timeout
        self._engines: dict[LogicalDatabase, AsyncEngine] = {}
        self._locks = {database: asyncio.Lock() for database in LogicalDatabase}

    @classmethod
    def from_config(cls, cfg: ApiConfig) -> "DatabaseGateway":
        return cls(
            make_database_urls(cfg),
            pool_size=cfg.DB_POOL_SIZE,
            pool_timeout=cfg.DB_POOL_TIMEOUT_SECONDS,
            query_timeout=cfg.DB_QUERY_TIMEOUT_SECONDS,
        )

    def is_connected(self, database: LogicalDatabase) -> bool:
        return database in self._engines

    def _create_engine(self, database: LogicalDatabase) -> AsyncEngine:
        url = self._urls.get(database)
        if not url:
            raise DatabaseUnavailable(database.value, f"No URL configured for {database.value} database")

        # SQLite drivers use a static/null pool that rejects pool sizing arguments
        if url.startswith("sqlite"):
            return create_async_engine(url)

        return create_async_engine(
            url,
            pool_pre_ping=True,
            pool_size=self._pool_size,
            max_overflow=0,
            pool_timeout=self._pool_timeout,
        )

    async def connect(self, database: LogicalDatabase) -> AsyncEngine:
        """
        Idempotently establish the pooled engine for ``database``.

        Raises:
            DatabaseUnavailable: if the first connection cannot be opened
        """
        engine = self._engines.get(database)
        if engine is not None:
            return engine

        async with self._locks[database]:
            engine = self._engines.get(database)
            if engine is not None:
                return engine

            engine = self._create_engine(database)
            try:
                await asyncio.wait_for(self._probe(engine), timeout=self._query_timeout)
            except asyncio.TimeoutError:
                await engine.dispose()
                logger.error(f"Timed out connecting to {database.value} database")
                raise DatabaseUnavailable(
                    database.value, f"Connection timed out after {self._query_timeout}s"
                )
            except (SQLAlchemyError, OSError) as e:
                await engine.dispose()
                logger.error(f"Failed to connect to {database.value} database: {e}")
                raise DatabaseUnavailable(database.value, str(e))

            self._engines[database] = engine
            logger.info(f"Connected to {database.value} database")
            return engine

    @staticmethod
    async def _probe(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _run(
        self,
        statement: Executable | str,
        params: Mapping[str, Any] | None,
        database: LogicalDatabase,
        scalar: bool,
    ):
        engine = await self.connect(database)
        if isinstance(statement, str):
            statement = text(statement)

        async def run():
            async with engine.connect() as conn:
                result = await conn.execute(statement, dict(params or {}))
                if scalar:
                    return result.scalar()
                return [dict(row) for row in result.mappings().all()]

        try:
            return await asyncio.wait_for(run(), timeout=self._query_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Query against {database.value} database timed out")
            raise DatabaseUnavailable(
                database.value, f"Query timed out after {self._query_timeout}s"
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Query against {database.value} database failed: {e}")
            raise DatabaseUnavailable(database.value, str(e))

    async def execute(
        self,
        statement: Executable | str,
        params: Mapping[str, Any] | None = None,
        database: LogicalDatabase = LogicalDatabase.MEMBERSHIP,
    ) -> list[dict]:
        """
        Run a statement with named bound parameters.

        Args:
            statement: SQLAlchemy statement or SQL text with ``:name`` placeholders
            params: Values for the named placeholders
            database: Which configured store to run against

        Returns:
            Result rows as dicts, in result order
        """
        return await self._run(statement, params, database, scalar=False)

    async def scalar(
        self,
        statement: Executable | str,
        params: Mapping[str, Any] | None = None,
        database: LogicalDatabase = LogicalDatabase.MEMBERSHIP,
    ) -> Any:
        """Run a statement and return the first column of the first row (or None)."""
        return await self._run(statement, params, database, scalar=True)

    async def check(self, database: LogicalDatabase) -> bool:
        """
        Check if the database connection is working.

        Returns:
            True if ``SELECT 1`` succeeds, False otherwise
        """
        try:
            await self.scalar("SELECT 1", database=database)
            return True
        except DatabaseUnavailable as e:
            logger.warning(f"Database connection check failure ({database.value}): {e.details}")
            return False

    async def dispose(self) -> None:
        """Dispose every engine created so far."""
        for database, engine in list(self._engines.items()):
            await engine.dispose()
            logger.info(f"Disposed {database.value} database connection pool")
        self._engines.clear()


LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` literally anywhere in a column."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"
