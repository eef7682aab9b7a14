"""URL Repository for the URL shortener application.

This module provides the URLRepository class for database operations related to UrlRecord models.
Following the Repository pattern, it abstracts database interactions for URL shortening operations.
"""

from typing import Any, Optional, Union

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models.url import MAX_SHORT_URL, URL_RECORD_SEQUENCE, UrlCounter, UrlRecord, UrlRecordCreate
from app.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError


class URLRepository(BaseRepository[UrlRecord, UrlRecordCreate]):
    """
    Repository for UrlRecord model database operations.

    Besides lookups by either side of the mapping, it owns the counter
    that hands out sequential short ids.
    """

    def __init__(self, sequence_name: str = URL_RECORD_SEQUENCE):
        """Initialize the repository with the UrlRecord model type."""
        super().__init__(UrlRecord)
        self.sequence_name = sequence_name

    async def get_by_original_url(self, db: AsyncSession, original_url: str) -> Optional[UrlRecord]:
        """
        Find a record by the URL that was submitted.

        Raises:
            RepositoryError: On database errors
        """
        return await self.find_one(db, original_url=original_url)

    async def get_by_short_url(
        self,
        db: AsyncSession,
        short_url: Union[int, str, Any]
    ) -> Optional[UrlRecord]:
        """
        Find a record by its short id.

        Args:
            db: Database session
            short_url: The id, either as stored or as the raw path segment

        Returns:
            The UrlRecord if found, None otherwise (including ids that are not
            plain decimal digits or are out of range)

        Raises:
            RepositoryError: On database errors
        """
        short_id = self._parse_short_url(short_url)
        if short_id is None:
            return None
        return await self.find_one(db, short_url=short_id)

    @staticmethod
    def _parse_short_url(short_url: Union[int, str, Any]) -> Optional[int]:
        # Only plain ASCII digits within the column range can address a record
        if isinstance(short_url, str):
            if not (short_url.isascii() and short_url.isdigit()):
                return None
            if len(short_url) > len(str(MAX_SHORT_URL)):
                return None
            short_url = int(short_url)
        if isinstance(short_url, bool) or not isinstance(short_url, int):
            return None
        if not 0 < short_url <= MAX_SHORT_URL:
            return None
        return short_url

    async def next_short_url(self, db: AsyncSession) -> int:
        """
        Atomically increment the id counter and return the new value.

        The UPDATE takes a row lock that is held until the surrounding
        transaction ends, so concurrent callers each receive a distinct id.
        On first use the counter is seeded from the number of stored records.

        Returns:
            The next short id to assign

        Raises:
            DuplicateEntityError: If a concurrent caller seeded the counter first
            RepositoryError: On other database errors
        """
        try:
            stmt = (
                update(UrlCounter)
                .where(UrlCounter.name == self.sequence_name)
                .values(value=UrlCounter.value + 1)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)

            if result.rowcount == 0:
                return await self._seed_counter(db)

            query = select(UrlCounter.value).where(UrlCounter.name == self.sequence_name)
            return (await db.execute(query)).scalar_one()
        except RepositoryError:
            raise
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryError(f"Error assigning next short URL: {e}") from e

    async def _seed_counter(self, db: AsyncSession) -> int:
        value = await self.count(db) + 1
        stmt = insert(UrlCounter).values(name=self.sequence_name, value=value)
        try:
            await db.execute(stmt)
        except IntegrityError as e:
            await db.rollback()
            raise DuplicateEntityError(UrlCounter, "name", self.sequence_name) from e
        return value
