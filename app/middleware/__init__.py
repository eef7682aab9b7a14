"""HTTP middleware for the URL shortener application."""

from app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
