"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access settings, the URL validator and service instances.
"""

import json
import logging
from typing import Any, Optional

from fastapi import Depends, Request
from starlette.formparsers import MultiPartException

from app.api.schemas import URLCreateRequest
from app.core.config import Settings
from app.repositories.url_repository import URLRepository
from app.services.shortener import ShortenerService
from app.services.validator import URLValidator

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_url_validator(request: Request) -> URLValidator:
    """Get the URL validator the application was created with."""
    return request.app.state.validator


async def get_url_repository():
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
    validator: URLValidator = Depends(get_url_validator),
) -> ShortenerService:
    """Get an instance of the URL shortening service."""
    return ShortenerService(url_repository=url_repo, validator=validator)


async def get_submitted_url(request: Request) -> Optional[Any]:
    """
    Read the ``url`` field from a JSON or form-encoded request body.

    A body that cannot be parsed yields None, which the service rejects
    as an invalid URL.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            payload = await request.json()
            if not isinstance(payload, dict):
                return None
        else:
            payload = dict(await request.form())
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError, MultiPartException) as e:
        logger.info(f"Unreadable shorten request body: {e}")
        return None

    return URLCreateRequest.model_validate(payload).url
