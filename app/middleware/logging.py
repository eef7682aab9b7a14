"""
Request logging middleware for FastAPI using Loguru.

Every request gets an id, exposed in the ``X-Request-ID`` response header,
and a single log line at the custom REQUEST level once it completes.
"""

import time
import uuid
from typing import Any, Dict

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.logging import register_request_level


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency for each request."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        register_request_level()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Every loguru record emitted while handling the request carries its id
        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            # Add request ID to response headers for traceability
            response.headers["X-Request-ID"] = request_id

            self._log({
                "client_ip": self._client_ip(request),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2),
            })

        return response

    @staticmethod
    def _client_ip(request: Request) -> str:
        # Get client IP with forwarded headers consideration
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    @staticmethod
    def _log(log_record: Dict[str, Any]) -> None:
        logger.log(
            "REQUEST",
            "{method} {path} {status_code} {process_time_ms}ms",
            **log_record
        )
