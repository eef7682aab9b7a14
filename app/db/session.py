"""Session management for database operations.

This module provides the FastAPI session dependency and a decorator that
wraps service methods in a transaction.
"""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import logging
import inspect
from functools import wraps

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.db.base import Database

logger = logging.getLogger(__name__)

# Generic return type for function decorators
T = TypeVar("T")


def get_database(request: Request) -> Database:
    """Return the Database handle attached to the running application."""
    return request.app.state.database


async def get_db(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    It manages the session lifecycle, rolling back when the handler raises.

    Yields:
        AsyncSession: A SQLAlchemy async session object.

    Example:
        ```python
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            return await repository.count(db)
        ```
    """
    async with database.session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def db_transaction(db_param_name: str = "db") -> Callable:
    """Decorator to wrap a coroutine in a database transaction.

    The session is located through the decorated function's signature by
    parameter name, so it may be passed positionally or by keyword. The
    transaction is committed when the coroutine returns and rolled back
    when it raises.

    Args:
        db_param_name: Name of the AsyncSession parameter (``db`` by convention).

    Example:
        ```python
        @db_transaction()
        async def create_record(self, db: AsyncSession, url: str) -> UrlRecord:
            ...
        ```

    Raises:
        ValueError: If the decorated function has no such parameter
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        func_signature = inspect.signature(func)
        if db_param_name not in func_signature.parameters:
            raise ValueError(
                f"Function '{func.__name__}' has no '{db_param_name}' parameter "
                f"to run the transaction on"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            bound = func_signature.bind_partial(*args, **kwargs)
            db: Optional[AsyncSession] = bound.arguments.get(db_param_name)
            if db is None:
                raise ValueError(
                    f"Database session not found in arguments for '{func.__name__}'"
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.warning(f"Transaction rolled back in '{func.__name__}': {e}")
                raise

        return wrapper
    return decorator
