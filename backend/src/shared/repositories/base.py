"""
Base Repository

This module provides a generic base repository with common CRUD operations.
All entity-specific repositories inherit from this class.

What This Provides:
===================
- get(id)              → Fetch single record by id
- list()               → List records with pagination and filtering
- count()              → Count records with filtering
- create()             → Create new record
- update()             → Update existing record
- increment_counters() → Atomic single-row counter UPDATE
- delete()             → Hard delete record

Generic Type Pattern:
=====================
    class UserRepository(BaseRepository[User]):
        pass

    repo = UserRepository(db)
    user = await repo.get(17)  # Returns User, not Any

flush() vs commit():
====================
- flush(): Sends SQL to database but doesn't commit transaction
- commit(): Called by get_db() after the request handler completes

Repository methods only flush, so a whole request is one transaction.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.base import Base


# TypeVar bound to Base ensures we only work with SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameter:
        ModelType: The SQLAlchemy model class this repository manages

    Attributes:
        model: The SQLAlchemy model class
        session: The async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        """
        Initialize the repository.

        Args:
            model: SQLAlchemy model class (e.g., User, ContentItem)
            session: Async database session from get_db()
        """
        self.model = model
        self.session = session

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, record_id: int) -> Optional[ModelType]:
        """
        Get a single record by id.

        Returns:
            The model instance if found, None otherwise

        SQL Generated:
            SELECT * FROM users WHERE id = 17
        """
        result = await self.session.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 100,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        order_desc: bool = True,
    ) -> list[ModelType]:
        """
        List records with pagination and optional equality filters.

        Args:
            offset: Number of records to skip
            limit: Maximum records to return
            filters: Dict of field=value for WHERE clauses
            order_by: Field name to order results by
            order_desc: If True, order descending

        Returns:
            List of model instances
        """
        query = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            query = query.order_by(order_field.desc() if order_desc else order_field)

        query = query.offset(offset).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """
        Count records with optional equality filters.

        SQL Generated:
            SELECT COUNT(*) FROM users
        """
        query = select(sql_count()).select_from(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        result = await self.session.execute(query)
        return result.scalar() or 0

    # ═══════════════════════════════════════════════════════════════════════════
    # CREATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Adds the instance, flushes to obtain the generated id and defaults,
        and refreshes it from the database.

        SQL Generated:
            INSERT INTO categories (name, slug, type) VALUES (...) RETURNING id, ...
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def insert_unique(self, instance: Base) -> bool:
        """
        Insert any mapped instance inside a savepoint.

        A uniqueness violation rolls back only the savepoint and returns
        False, leaving the surrounding request transaction usable. This is
        how "insert first, treat the constraint as the answer" is done.

        Returns:
            True if the row was inserted, False if a constraint rejected it
        """
        try:
            async with self.session.begin_nested():
                self.session.add(instance)
        except IntegrityError:
            return False
        return True

    # ═══════════════════════════════════════════════════════════════════════════
    # UPDATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def update(
        self,
        record_id: int,
        **kwargs: Any,
    ) -> Optional[ModelType]:
        """
        Update a record by id.

        None values are skipped to allow partial updates.

        Returns:
            Updated model instance, or None if not found
        """
        instance = await self.get(record_id)
        if not instance:
            return None

        for field, value in kwargs.items():
            if hasattr(instance, field) and value is not None:
                setattr(instance, field, value)

        await self.session.flush()
        await self.session.refresh(instance)

        return instance

    async def increment_counters(self, record_id: int, **deltas: float) -> bool:
        """
        Atomically add deltas to integer columns of one row.

        The arithmetic happens inside the UPDATE statement, so concurrent
        increments never lose each other.

        Example:
            await repo.increment_counters(item_id, play_count=1)

        SQL Generated:
            UPDATE content_items SET play_count = play_count + 1 WHERE id = 100

        Returns:
            True if a row was updated
        """
        values = {
            field: getattr(self.model, field) + delta
            for field, delta in deltas.items()
        }
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == record_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    # ═══════════════════════════════════════════════════════════════════════════
    # DELETE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def delete(self, record_id: int) -> bool:
        """
        Hard delete a record by id.

        ORM relationship cascades remove dependent rows in the same flush.

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get(record_id)
        if not instance:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True
