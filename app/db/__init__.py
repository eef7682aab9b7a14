"""Database module for the URL shortener application."""
from app.db.base import Database, get_engine
from app.db.session import get_database, get_db, db_transaction

__all__ = [
    "Database",
    "get_engine",
    "get_database",
    "get_db",
    "db_transaction",
]
