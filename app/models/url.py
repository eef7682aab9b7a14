"""URL shortener data models.

This module defines the UrlRecord model mapping original URLs to their
numeric short ids, and the UrlCounter model used to hand out those ids.
"""
from typing import Optional

from sqlmodel import Field, SQLModel


# Name of the counter row that tracks the last assigned short_url
URL_RECORD_SEQUENCE = "url_records"

# Largest id a 32-bit INTEGER short_url column can hold
MAX_SHORT_URL = 2**31 - 1


class UrlRecordBase(SQLModel):
    """Base model for short URL data."""

    original_url: str = Field(
        description="The original (long) URL to redirect to",
        unique=True,
    )
    short_url: int = Field(
        description="Sequential numeric id used in the redirect path",
        unique=True,   # Creates necessary index
    )


class UrlRecord(UrlRecordBase, table=True):
    """
    Persisted mapping between an original URL and its short id.

    Records are created on the first successful submission of a URL and
    are never updated or deleted afterwards.
    """

    __tablename__ = "url_records"

    id: Optional[int] = Field(default=None, primary_key=True)


class UrlRecordCreate(UrlRecordBase):
    """Schema for creating a new URL record."""
    pass


class UrlCounter(SQLModel, table=True):
    """Named monotonic sequence; ``value`` is the last id handed out."""

    __tablename__ = "url_counters"

    name: str = Field(primary_key=True)
    value: int = Field(default=0)
