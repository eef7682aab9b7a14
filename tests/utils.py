"""Test utilities for URL shortener tests."""

import random
import string
from typing import Iterable, List, Optional

from app.models.url import UrlRecord
from app.repositories.base import RepositoryError
from app.repositories.url_repository import URLRepository

# Hostname the fake resolver refuses to resolve
UNRESOLVABLE_HOST = "no-such-host.example"


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_record(
    db,
    original_url: Optional[str] = None,
    short_url: int = 1,
) -> UrlRecord:
    """Create and persist a test UrlRecord in the database."""
    record = UrlRecord(original_url=original_url or random_url(), short_url=short_url)
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return record


class FakeResolver:
    """Resolves every hostname except the configured ones, recording lookups."""

    def __init__(self, unresolvable: Iterable[str] = ()):
        self.unresolvable = set(unresolvable)
        self.lookups: List[str] = []

    async def resolve(self, hostname: str) -> bool:
        self.lookups.append(hostname)
        return hostname not in self.unresolvable


class FailingURLRepository(URLRepository):
    """URL repository whose every query fails like a lost connection."""

    async def find_one(self, db, **filters):
        raise RepositoryError("Test database error")

    async def next_short_url(self, db):
        raise RepositoryError("Test database error")
