"""
Database connection and schema management.

SQLAlchemy 2.0 async pattern:
- Database: one handle owning the engine (the connection pool) and the
  session factory; created at startup and passed to routes as a dependency
- Base: parent class for all our ORM models
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Union

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from alert_api.core.config import Settings


logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL CLASS
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# =============================================================================
# CONNECTION PROVIDER
# =============================================================================
# The engine maintains a bounded pool of connections:
# - pool_size: how many connections may be open at once
# - max_overflow=0: never open more than pool_size; extra callers wait in line
# - pool_pre_ping=True: tests connections before handing them out


def _pool_options(url: URL, pool_size: int) -> dict[str, Any]:
    # SQLite drivers use their own pool classes that reject sizing arguments
    if url.get_backend_name() == "sqlite":
        return {}
    return {"pool_size": pool_size, "max_overflow": 0}


class Database:
    """
    Handle around the async engine and its session factory.

    Usage:
        database = Database("postgresql+psycopg://user:pw@host/db")
        async with database.session() as session:
            await session.execute(...)
    """

    def __init__(
        self,
        url: Union[str, URL],
        *,
        pool_size: int = 10,
        echo: bool = False,
    ) -> None:
        self.url = make_url(url)
        self.engine = create_async_engine(
            self.url,
            echo=echo,
            pool_pre_ping=True,
            **_pool_options(self.url, pool_size),
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            echo=settings.debug,
        )

    async def ping(self) -> bool:
        """Acquire a connection, run a trivial query and release it."""
        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Database connection failed: %s", exc)
            return False

        logger.debug("Database connected successfully")
        return True

    async def init_schema(self) -> None:
        """
        Create the alerts table and its indexes if they do not exist yet.

        create_all checks for each table first, so running it again is a no-op.
        """
        # Register the models on Base.metadata
        from alert_api import models  # noqa: F401

        try:
            async with self.engine.begin() as connection:
                await connection.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            logger.error("Error creating alerts table: %s", exc)
            raise

        logger.info("Alerts table created successfully or already exists")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
