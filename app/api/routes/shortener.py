"""URL shortening and redirection endpoints."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.api import schemas
from app.api.dependencies import get_settings, get_shortener_service, get_submitted_url
from app.core.config import Settings
from app.db.session import get_db
from app.services.shortener import ShortenerService
from app.services.exceptions import (
    InvalidURLError,
    URLNotFoundError,
    URLProcessingError,
)

INVALID_URL_MESSAGE = "Invalid URL"
NOT_FOUND_MESSAGE = "Short URL not found"
PROCESSING_FAILURE_MESSAGE = "Failed to process request"

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorturl",
    response_model=schemas.URLResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": schemas.URLResponse, "description": "URL was already shortened"},
        500: {"model": schemas.ErrorResponse, "description": "Record store failure"},
    }
)
async def create_short_url(
    url: Optional[Any] = Depends(get_submitted_url),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenerService = Depends(get_shortener_service),
    settings: Settings = Depends(get_settings),
):
    try:
        record, created = await shortener_service.create_short_url(db=db, original_url=url)
    except InvalidURLError as e:
        logger.info(f"Rejected submission: {e}")
        return JSONResponse(
            status_code=settings.INVALID_URL_STATUS_CODE,
            content={"error": INVALID_URL_MESSAGE},
        )
    except URLProcessingError as e:
        logger.error("Error saving URL", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": PROCESSING_FAILURE_MESSAGE},
        )

    body = schemas.URLResponse.model_validate(record).model_dump()
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=body,
    )


@router.get(
    "/shorturl/{short_url}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"},
        500: {"model": schemas.ErrorResponse, "description": "Record store failure"},
    }
)
async def redirect_to_original_url(
    short_url: str = Path(..., description="The numeric short id"),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenerService = Depends(get_shortener_service),
):
    """Redirect to the original URL stored under ``short_url``."""
    try:
        original_url = await shortener_service.resolve_short_url(db, short_url)
    except URLNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": NOT_FOUND_MESSAGE},
        )
    except URLProcessingError as e:
        logger.error("Error finding URL", short_url=short_url, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": PROCESSING_FAILURE_MESSAGE},
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
