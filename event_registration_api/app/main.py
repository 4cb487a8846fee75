"""
Main entrypoint for the Event Registration API.

This module assembles the FastAPI application: it sets up logging,
builds the stores and services, installs the error handlers and
includes the versioned routers.  The ``create_app`` function builds
and configures the app, which is then instantiated at module import
time as ``app``, e.g.::

    uvicorn event_registration_api.app.main:app --reload

Service errors raised anywhere below the endpoints are translated into
JSON responses here, so handlers never build error responses
themselves:

* ``ValidationError`` -> 400 ``{"error": ..., "errors": [...]}``
* other ``ServiceError`` subclasses -> their status, ``{"error": ...}``
* unknown routes -> 404 ``{"error": "Route not found"}``
* anything unexpected -> 500 ``{"error": "Internal server error"}``
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.clock import Clock, utcnow
from .core.config import Settings, settings as default_settings
from .core.errors import ServiceError, UnauthenticatedError, ValidationError
from .core.logging_config import setup_logging
from .services.container import build_services
from .services.notification_service import Notifier

logger = logging.getLogger(__name__)


def _format_request_errors(exc: RequestValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return messages


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "errors": exc.errors})

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _format_request_errors(exc)
        return JSONResponse(status_code=400, content={"error": "Invalid request", "errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[Notifier] = None,
    clock: Clock = utcnow,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Each call builds its own stores, so separate applications (for
    example one per test) never share data.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use instead of the environment-derived
        defaults.
    notifier : Optional[Notifier]
        Replacement for the SMTP notifier.
    clock : Clock
        Source of timestamps for created and updated records.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that everything below
    # can safely log messages.
    setup_logging(settings.log_level, settings.log_file)

    services = build_services(settings, notifier, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s %s starting", settings.project_name, settings.api_version)
        yield
        # Let queued confirmation emails finish before the process exits.
        services.dispatcher.shutdown(wait=True)
        logger.info("Application shutdown")

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    _register_exception_handlers(app)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
