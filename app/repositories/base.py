"""Base repository implementation for the URL shortener application.

This module provides a generic BaseRepository class that follows the Repository pattern
for database operations, serving as a foundation for more specific repositories.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel

# Type variable for model types
T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository implementing the common operations for SQLModel entities.

    Type parameters:
        T: The SQLModel type this repository manages
        CreateSchemaType: The Pydantic model type for creation operations
    """

    def __init__(self, model_type: Type[T]):
        """
        Initialize the repository with a specific model type.

        Args:
            model_type: The SQLModel class this repository will work with
        """
        self.model_type = model_type

    async def find_one(self, db: AsyncSession, **filters: Any) -> Optional[T]:
        """
        Get the first entity matching all field=value filters.

        Args:
            db: Database session
            **filters: Field=value pairs to filter by

        Returns:
            The entity if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        if not filters:
            raise ValueError("No conditions provided for lookup")

        conditions = [getattr(self.model_type, field) == value for field, value in filters.items()]
        try:
            query = select(self.model_type).where(*conditions).limit(1)
            result = await db.execute(query)
            return result.scalars().first()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error retrieving {self.model_type.__name__} by {filters}: {e}")
            raise RepositoryError(f"Database error retrieving entity: {e}") from e

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Create a new entity.

        Args:
            db: Database session
            data: Entity data (either as a Pydantic model or dictionary)

        Returns:
            The created entity

        Raises:
            DuplicateEntityError: When a unique column already holds the value
            RepositoryError: On other database errors
        """
        # Convert Pydantic model to dict if needed
        if isinstance(data, BaseModel):
            data_dict = data.model_dump(exclude_unset=True)
        else:
            data_dict = data

        try:
            entity = self.model_type(**data_dict)
            db.add(entity)
            await db.flush()  # Flush to generate ID but don't commit yet

            # Refresh to get any default values or generated columns
            await db.refresh(entity)
            return entity
        except IntegrityError as e:
            await db.rollback()
            field_name, value = self._violated_field(data_dict, e)
            logger.warning(f"Duplicate {self.model_type.__name__} rejected: {field_name}={value}")
            raise DuplicateEntityError(self.model_type, field_name, value) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error creating {self.model_type.__name__}: {e}")
            await db.rollback()
            raise RepositoryError(f"Database error creating entity: {e}") from e

    async def count(self, db: AsyncSession) -> int:
        """
        Count the total number of entities.

        Args:
            db: Database session

        Returns:
            Total count of entities

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(func.count()).select_from(self.model_type)
            result = await db.execute(query)
            return result.scalar_one()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise RepositoryError(f"Database error counting entities: {e}") from e

    @staticmethod
    def _violated_field(data: Dict[str, Any], error: IntegrityError):
        # Both SQLite and PostgreSQL name the offending column in the message
        message = str(error.orig) if error.orig is not None else str(error)
        for field_name, value in data.items():
            if field_name in message:
                return field_name, value
        return "unique field", None
