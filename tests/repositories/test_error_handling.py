"""Tests for repository error handling."""

import pytest
from unittest.mock import patch
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.repositories.url_repository import RepositoryError, DuplicateEntityError
from tests.utils import random_url


@pytest.mark.repository
class TestRepositoryErrorHandling:
    """Tests for error handling in repositories."""

    @pytest.mark.asyncio
    async def test_lookup_error_handling(self, test_db, url_repository):
        """Test handling of database errors on lookups."""
        with patch.object(test_db, 'execute', side_effect=SQLAlchemyError("Test database error")):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.get_by_short_url(test_db, "1")

            assert "Test database error" in str(excinfo.value)

            with pytest.raises(RepositoryError):
                await url_repository.get_by_original_url(test_db, random_url())

    @pytest.mark.asyncio
    async def test_count_error_handling(self, test_db, url_repository):
        with patch.object(test_db, 'execute', side_effect=SQLAlchemyError("Test database error")):
            with pytest.raises(RepositoryError):
                await url_repository.count(test_db)

    @pytest.mark.asyncio
    async def test_next_short_url_error_handling(self, test_db, url_repository):
        error = OperationalError("UPDATE url_counters", {}, Exception("connection lost"))
        with patch.object(test_db, 'execute', side_effect=error):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.next_short_url(test_db)

        assert not isinstance(excinfo.value, DuplicateEntityError)

    @pytest.mark.asyncio
    async def test_create_error_handling(self, test_db, url_repository):
        with patch.object(test_db, 'flush', side_effect=SQLAlchemyError("Test write error")):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.create(
                    test_db, {"original_url": random_url(), "short_url": 1}
                )

        assert "Test write error" in str(excinfo.value)
        assert not isinstance(excinfo.value, DuplicateEntityError)

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, test_db, url_repository):
        """Verify the transaction is rolled back on a duplicate insert."""
        count_query = text("SELECT COUNT(*) FROM url_records")
        result = await test_db.execute(count_query)
        initial_count = result.scalar()

        test_url = random_url()
        await url_repository.create(test_db, {"original_url": test_url, "short_url": 1})
        await test_db.commit()

        with pytest.raises(DuplicateEntityError):
            await url_repository.create(test_db, {"original_url": random_url(), "short_url": 1})

        result = await test_db.execute(count_query)
        final_count = result.scalar()

        assert final_count == initial_count + 1

    @pytest.mark.asyncio
    async def test_driver_connection_error_handling(self, test_db, url_repository):
        """Connection failures the driver raises unwrapped are repository errors too."""
        refused = ConnectionRefusedError(111, "Connect call failed")
        with patch.object(test_db, 'execute', side_effect=refused):
            with pytest.raises(RepositoryError):
                await url_repository.get_by_short_url(test_db, "1")

            with pytest.raises(RepositoryError):
                await url_repository.next_short_url(test_db)

            with pytest.raises(RepositoryError):
                await url_repository.count(test_db)
