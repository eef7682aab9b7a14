"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Dict, Optional, Any

from pydantic import BaseModel, ConfigDict


class URLCreateRequest(BaseModel):
    """Request body for creating a short URL (JSON or form fields)."""
    url: Optional[Any] = None


class URLResponse(BaseModel):
    """A stored mapping as returned to clients."""
    original_url: str
    short_url: int

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Error body shared by every JSON error response."""
    error: str


class GreetingResponse(BaseModel):
    greeting: str


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    components: Dict[str, Dict[str, Any]]
