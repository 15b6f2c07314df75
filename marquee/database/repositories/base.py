"""
Base repository with generic async operations.

Provides a reusable base class for all repositories with common
database operations and error translation into the pipeline taxonomy.
"""

from datetime import date, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import Executable, Result, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marquee.database.models.base import Base
from marquee.etl.errors import ConflictError, PersistenceError

# Type alias for valid database field values
FieldValue = str | int | float | bool | date | datetime | None

# Generic type variable bound to Base model
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic repository providing common async operations.

    Attributes:
        model: SQLAlchemy model class.
        session: Database session.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session instance.
        """
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def get_by_id(self, entity_id: Any) -> ModelT | None:
        """Retrieve entity by primary key.

        Args:
            entity_id: Primary key value.

        Returns:
            Entity instance or None if not found.
        """
        return await self._session.get(self.model, entity_id)

    async def get_by_field(self, field_name: str, value: FieldValue) -> ModelT | None:
        """Retrieve entity by a specific field value.

        Args:
            field_name: Name of the field to filter on.
            value: Value to match.

        Returns:
            Entity instance or None if not found.
        """
        field = getattr(self.model, field_name)
        stmt = select(self.model).where(field == value)
        result = await self._session.scalars(stmt)
        return result.first()

    async def get_many_by_field(
        self,
        field_name: str,
        value: FieldValue,
        limit: int = 100,
    ) -> list[ModelT]:
        """Retrieve multiple entities by a specific field value.

        Args:
            field_name: Name of the field to filter on.
            value: Value to match.
            limit: Maximum number of results.

        Returns:
            List of entity instances.
        """
        field = getattr(self.model, field_name)
        stmt = select(self.model).where(field == value).limit(limit)
        result = await self._session.scalars(stmt)
        return list(result.all())

    async def count(self) -> int:
        """Count total number of entities.

        Returns:
            Total count.
        """
        stmt = select(func.count()).select_from(self.model)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def create(self, entity: ModelT) -> ModelT:
        """Create a new entity.

        Args:
            entity: Entity instance to persist.

        Returns:
            Persisted entity with generated ID.

        Raises:
            ConflictError: On unique constraint violation.
            PersistenceError: On any other database error.
        """
        self._session.add(entity)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictError(f"{self.model.__name__} already exists: {e.orig}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"{self.model.__name__} insert failed: {e}") from e
        return entity

    # -------------------------------------------------------------------------
    # Statement helpers
    # -------------------------------------------------------------------------

    def _insert(self, model: type[Base] | None = None) -> Any:
        """Build a dialect-specific INSERT supporting ON CONFLICT.

        Args:
            model: Target model (defaults to the repository model).

        Returns:
            PostgreSQL or SQLite Insert construct.
        """
        target = model or self.model
        dialect = self._session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(target)
        return postgresql.insert(target)

    async def _execute(self, stmt: Executable) -> Result[Any]:
        """Execute a statement, translating database errors.

        Args:
            stmt: Statement to execute.

        Returns:
            Execution result.

        Raises:
            ConflictError: On unique constraint violation.
            PersistenceError: On any other database error.
        """
        try:
            return await self._session.execute(stmt)
        except IntegrityError as e:
            raise ConflictError(f"{self.model.__name__} conflict: {e.orig}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"{self.model.__name__} query failed: {e}") from e
