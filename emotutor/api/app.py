# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Emotutor API.

Example:
    uvicorn emotutor.api.app:create_app --factory --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from emotutor.api.dependencies import OrchestratorFactory, close_orchestrator, init_orchestrator
from emotutor.api.routes import health
from emotutor.api.v1 import router as v1_router
from emotutor.core.config import get_settings
from emotutor.core.tutoring.errors import (
    ContextUnavailableError,
    InvalidRequestError,
    TutoringError,
)
from emotutor.infrastructure.database import close_database, init_database
from emotutor.utils.logging import setup_logging

logger = logging.getLogger(__name__)

INVALID_REQUEST_STATUS = 422


def _error_body(kind: str, message: str, details: object | None = None) -> dict:
    error: dict = {"kind": kind, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=INVALID_REQUEST_STATUS,
        content=jsonable_encoder(
            _error_body(InvalidRequestError.kind, "Request validation failed", exc.errors())
        ),
    )


async def _tutoring_error_handler(request: Request, exc: TutoringError) -> JSONResponse:
    if isinstance(exc, InvalidRequestError):
        status_code = INVALID_REQUEST_STATUS
    elif isinstance(exc, ContextUnavailableError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error("Tutoring request failed: %s (%s)", exc.message, exc.kind)
    return JSONResponse(status_code=status_code, content=_error_body(exc.kind, exc.message))


def create_app(orchestrator_factory: OrchestratorFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator_factory: Builds the orchestrator from settings.
            Defaults to wiring from configuration.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager.

        Startup: logging, optional database pool, orchestrator.
        Shutdown: drain side effects, close the database pool.
        """
        setup_logging(settings)
        logger.info("Starting Emotutor API (environment=%s)", settings.environment)

        if settings.database.enabled:
            await init_database(settings)
            logger.info("Database connection initialized")

        init_orchestrator(settings, orchestrator_factory)

        yield

        await close_orchestrator()

        if settings.database.enabled:
            await close_database()
            logger.info("Database connection closed")

        logger.info("Shutting down Emotutor API")

    app = FastAPI(
        title=settings.api.title,
        description="Emotionally adaptive tutoring-response engine",
        version=settings.api.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(TutoringError, _tutoring_error_handler)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
