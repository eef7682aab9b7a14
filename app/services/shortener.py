"""URL shortening service for the URL shortener application.

This module contains the ShortenerService class which implements business logic
for URL shortening and short id resolution.
"""

import logging
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.url import UrlRecord
from app.repositories.url_repository import URLRepository
from app.repositories.base import RepositoryError, DuplicateEntityError
from app.services.exceptions import (
    InvalidURLError,
    URLNotFoundError,
    URLProcessingError,
)
from app.services.validator import URLValidator
from app.db.session import db_transaction

logger = logging.getLogger(__name__)


class ShortenerService:
    """
    Service for URL shortening business logic.

    This service validates submitted URLs, deduplicates them against stored
    records, assigns sequential short ids and resolves ids back to URLs.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        validator: URLValidator,
        max_attempts: int = 3
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for URL data access
            validator: Checks submitted URLs before anything is stored
            max_attempts: Tries per submission when concurrent writers conflict
        """
        self.url_repository = url_repository
        self.validator = validator
        self.max_attempts = max_attempts

    async def create_short_url(self, db: AsyncSession, original_url) -> Tuple[UrlRecord, bool]:
        """
        Return the record for ``original_url``, creating it when it is new.

        Args:
            db: Database session
            original_url: The URL exactly as submitted

        Returns:
            Tuple of the record and whether it was created by this call

        Raises:
            InvalidURLError: If the URL is missing, malformed or does not resolve
            URLProcessingError: If the record store fails, including on commit
        """
        try:
            return await self._create_in_transaction(db, original_url)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error committing short URL for {original_url}: {e}")
            raise URLProcessingError(f"Failed to create short URL: {e}") from e

    @db_transaction(db_param_name="db")
    async def _create_in_transaction(self, db: AsyncSession, original_url) -> Tuple[UrlRecord, bool]:
        if not await self.validator.validate(original_url):
            raise InvalidURLError(f"Invalid URL: {original_url!r}")

        conflict = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._get_or_create(db, original_url)
            except DuplicateEntityError as e:
                # A concurrent request stored the same URL or seeded the counter first;
                # the transaction was rolled back, so looking again sees its result
                logger.info(f"Conflict creating short URL for {original_url} (attempt {attempt}): {e}")
                conflict = e
            except RepositoryError as e:
                logger.error(f"Error creating short URL: {e}")
                raise URLProcessingError(f"Failed to create short URL: {e}") from e

        raise URLProcessingError(f"Failed to create short URL: {conflict}") from conflict

    async def _get_or_create(self, db: AsyncSession, original_url: str) -> Tuple[UrlRecord, bool]:
        existing = await self.url_repository.get_by_original_url(db, original_url)
        if existing:
            return existing, False

        short_url = await self.url_repository.next_short_url(db)
        record = await self.url_repository.create(
            db, {"original_url": original_url, "short_url": short_url}
        )
        logger.info(f"Created short URL {record.short_url} for {original_url}")
        return record, True

    async def resolve_short_url(self, db: AsyncSession, short_url) -> str:
        """
        Retrieve the original URL stored under a short id.

        Args:
            db: Database session
            short_url: The short id, possibly as the raw path segment

        Returns:
            str: The original URL to redirect to

        Raises:
            URLNotFoundError: If no URL with this id exists
            URLProcessingError: If the record store fails
        """
        try:
            record = await self.url_repository.get_by_short_url(db, short_url)
        except RepositoryError as e:
            logger.error(f"Error retrieving URL by short id: {e}")
            raise URLProcessingError(f"Failed to retrieve short URL {short_url}") from e

        if record is None:
            raise URLNotFoundError(f"Short URL {short_url} not found")
        return record.original_url
