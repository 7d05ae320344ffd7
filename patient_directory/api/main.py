"""Main FastAPI application for Patient Directory.

This module sets up the FastAPI application with all routes, middleware,
and configuration for the patient directory API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from patient_directory import __version__
from patient_directory.api.logging_config import setup_logging
from patient_directory.api.middleware import setup_middleware
from patient_directory.api.routes import health, patients
from patient_directory.infrastructure.settings import settings

setup_logging(use_json=settings.json_logs, log_level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"{settings.app_name} API starting up...")
    logger.info("API documentation available at /api/docs")
    logger.info(f"Logging level: {settings.log_level}")
    logger.info(f"JSON logs: {settings.json_logs}")
    yield
    logger.info(f"{settings.app_name} API shutting down...")


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Read-only patient directory with search, filtering, sorting and pagination",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

setup_middleware(app)

app.include_router(patients.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.app_name} API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/api/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "patient_directory.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level="info"
    )
