"""Greeting and health check endpoints for monitoring application status."""

from fastapi import APIRouter, Depends, status

from app.api import schemas
from app.api.dependencies import get_settings
from app.core.config import Settings
from app.db.base import Database
from app.db.session import get_database

router = APIRouter(tags=["health"])


@router.get("/hello", response_model=schemas.GreetingResponse)
async def hello():
    """Trivial liveness probe."""
    return {"greeting": "hello API"}


@router.get(
    "/health",
    response_model=schemas.HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """Check health of the record store."""
    database_status = await database.check_connection()
    return {
        "status": "healthy" if database_status["status"] == "healthy" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "components": {"database": database_status},
    }
