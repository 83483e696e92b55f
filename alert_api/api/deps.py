"""
FastAPI dependencies for route handlers.

The Database handle is created once at startup and stored on
`app.state.database`. Routes never import it directly; they receive it
(or a session from it) through these dependencies, so tests can swap
in their own with `app.dependency_overrides`.
"""

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from alert_api.core.db import Database


def get_database(request: Request) -> Database:
    """Return the process-wide Database handle."""
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides a database session.

    Usage in a route:
        @router.get("/alerts")
        async def list_alerts(db: AsyncSession = Depends(get_db)):
            # use db here
    """
    async with database.session() as session:
        yield session
