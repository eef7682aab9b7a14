"""
Data models for the URL shortener application.

This module imports and exports all SQLModel models used in the application.
"""

# First import SQLModel itself to ensure metadata is initialized
from sqlmodel import SQLModel

from app.models.url import (
    MAX_SHORT_URL,
    URL_RECORD_SEQUENCE,
    UrlCounter,
    UrlRecord,
    UrlRecordBase,
    UrlRecordCreate,
)

__all__ = [
    "SQLModel",
    "URL_RECORD_SEQUENCE",
    "MAX_SHORT_URL",
    "UrlCounter",
    "UrlRecord",
    "UrlRecordBase",
    "UrlRecordCreate",
]
