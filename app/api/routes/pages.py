"""Landing page."""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.api.dependencies import get_settings
from app.core.config import Settings

router = APIRouter(tags=["pages"])


@router.get("/", response_class=FileResponse, include_in_schema=False)
async def index(settings: Settings = Depends(get_settings)):
    return FileResponse(os.path.join(settings.VIEWS_DIR, "index.html"))
