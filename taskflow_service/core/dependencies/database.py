"""Database dependencies for FastAPI route handlers.

Two session getters exist:

1. `get_db_session()` (this module) - FastAPI dependency, one session per request.
2. `get_async_session()` (infra.database.session) - context manager for CLI
   commands and scripts.

Both use the same session factory.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow_service.infra.database.session import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_async_session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
