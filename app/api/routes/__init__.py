"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from app.api.routes import shortener, health, pages


def build_api_router(api_prefix: str = "/api") -> APIRouter:
    """Assemble the application's routes under the given API prefix."""
    api_router = APIRouter()

    # Shortener and redirect routes live under the API prefix
    api_router.include_router(shortener.router, prefix=api_prefix)

    api_router.include_router(health.router, prefix=api_prefix)

    # Landing page at the root path
    api_router.include_router(pages.router)

    return api_router


__all__ = ["build_api_router"]
