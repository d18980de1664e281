"""
Car Store Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       that owns one Database (engine + pool) on app.state.
Who:   Called by uvicorn (uvicorn app.main:app) or by `run()`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access Log → GZip → CORS │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/cars    │ │ /api/orders  │ │ / , /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers (→ envelope):                   │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → optional create_all
    Shutdown: dispose the database engine
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import (
    CarStoreError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import cars, health, orders
from app.schemas.common import ErrorInfo, ErrorResponse
from app.validation import field_errors

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate critical configuration (logged, not fatal)
        3. Create tables when DB_CREATE_TABLES is set
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(app_settings.log_level)
    logger.info("Car Store backend %s starting up...", __version__)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem
        logger.error("Configuration error: %s", str(e))

    if app_settings.db_create_tables:
        await database.create_all()
        logger.info("Database tables ensured")

    logger.info("Server ready on %s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Car Store backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _envelope(
    status_code: int,
    message: str,
    name: str,
    stack: Optional[str] = None,
    errors: Optional[Dict[str, Dict[str, str]]] = None,
    detail: Optional[str] = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=ErrorInfo(name=name, message=detail or message, stack=stack, errors=errors or None),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _stack(request: Request, exc: BaseException) -> Optional[str]:
    """Formatted traceback, only when the app runs in debug mode."""
    if not request.app.state.settings.debug:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the error envelope.

    Handler table:
        ValidationError / InsufficientStockError → 400 (per-field errors)
        RequestValidationError (bad JSON, etc.)  → 400 (per-field errors)
        NotFoundError                            → 404
        DatabaseError                            → 500
        CarStoreError (base)                     → 500
        Exception (fallback)                     → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s %s", rid, exc.message, list(exc.errors))
        return _envelope(400, exc.message, exc.name, errors=exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # FastAPI locations start with "body"/"query"/"path"; drop the "body" prefix
        errors = [
            {**error, "loc": tuple(error.get("loc", ()))[1:]}
            if tuple(error.get("loc", ()))[:1] == ("body",)
            else error
            for error in exc.errors()
        ]
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation error: %s", rid, errors)
        return _envelope(400, "Validation failed", "ValidationError", errors=field_errors(errors))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _envelope(404, exc.message, exc.name)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _envelope(500, exc.message, exc.name, stack=_stack(request, exc))

    @app.exception_handler(CarStoreError)
    async def handle_app_error(request: Request, exc: CarStoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s", rid, exc.message, exc_info=exc)
        return _envelope(500, exc.message, exc.name, stack=_stack(request, exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        response = _envelope(
            500,
            "An unexpected error occurred",
            type(exc).__name__,
            stack=_stack(request, exc),
            detail=str(exc),
        )
        # Rendered by ServerErrorMiddleware, outside RequestIDMiddleware
        if rid:
            response.headers["X-Request-ID"] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app with; the module-level
                      settings (environment) when omitted. Tests pass their
                      own to point at a throwaway database.

    Returns:
        Fully configured FastAPI instance. app.state.database is the only
        handle on the store; request handlers reach it through
        app.database.get_db_session.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Car Store API",
        description="Inventory and order management for a car store.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings)

    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(cars.router)
    app.include_router(orders.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app on HOST:PORT from the settings."""
    uvicorn.run(
        "app.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `app.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
