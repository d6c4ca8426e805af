"""
Database Dependency

FastAPI dependency for database sessions.

This module provides the get_db dependency that yields async database sessions
to route handlers. The session is automatically committed on success and
rolled back on error.

Usage:
======
    from fastapi import Depends
    from sqlalchemy.ext.asyncio import AsyncSession
    from src.api.dependencies.database import get_db, DbSession

    # Using type alias (recommended)
    @router.get("/categories")
    async def list_categories(db: DbSession):
        return await CategoryRepository(db).list_all()

    # Using explicit Depends
    @router.get("/users/{user_id}")
    async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
        return await UserRepository(db).get(user_id)
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.db import get_db as _get_db


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Yields an async database session for the duration of the request.
    The session is automatically:
    - Committed on success
    - Rolled back on exception
    - Closed after the request

    Yields:
        AsyncSession: Database session for the current request
    """
    async for session in _get_db():
        yield session


# Type alias for cleaner route signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
