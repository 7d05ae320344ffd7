"""Middleware configuration for the API.

This module sets up middleware for request logging and last-resort error
handling, and holds the CORS headers every patient response carries.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Cross-origin access is unrestricted
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def request_context(request: Request) -> dict:
    """Build the structured log fields describing a request."""
    return {
        "method": request.method,
        "endpoint": request.url.path,
        "query": str(request.url.query),
        "client_ip": request.client.host if request.client else "unknown",
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response with X-Process-Time header
        """
        start_time = time.time()
        context = request_context(request)

        logger.info(
            f"{request.method} {request.url.path} - Client: {context['client_ip']}",
            extra=context
        )

        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"

        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time": round(process_time, 3),
            }
        )

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for global error handling."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Turn any exception that escaped a route into a generic 500.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response, or a JSON error body if an exception occurred
        """
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unexpected error: {str(e)}", exc_info=True, extra=request_context(request))
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers=CORS_HEADERS
            )


def setup_middleware(app) -> None:
    """Setup application middleware.

    Parameters:
        app: FastAPI application instance

    Middleware Order (important):
        1. ErrorHandlingMiddleware - Handles errors
        2. LoggingMiddleware - Logs requests/responses
    """
    # Error handling (before logging to catch errors)
    app.add_middleware(ErrorHandlingMiddleware)

    # Logging (last, to log everything including errors)
    app.add_middleware(LoggingMiddleware)
