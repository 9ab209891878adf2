"""
Naviga8 Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance that
       owns its Database. Callers (tests) may pass their own Database.
Who:   Called by uvicorn to start the server (uvicorn app.main:app), or by
       the `naviga8` console script via run().

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                       FastAPI App                           │
    │                                                             │
    │  Middleware Chain:                                          │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────────┐ ┌───────┐   │
    │  │  Req ID  │→│ Logging  │→│ Security headers │→│ CORS  │   │
    │  └──────────┘ └──────────┘ └──────────────────┘ └───────┘   │
    │                                                             │
    │  Routes:                                                    │
    │  POST /save-route   GET /routes   DELETE /delete-route/{id} │
    │  GET /api/google-key   GET /api/user-id   GET /health       │
    │  GET /   GET /saved-routes.html                             │
    │                                                             │
    │  Exception Handlers:                                        │
    │  Validation→400 │ NotFound→404 │ Conflict→409 │ Store→500   │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Report missing optional configuration
    3. Verify the store is reachable (failure aborts startup)
    4. Create tables when DB_AUTO_CREATE is set

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import Database
from app.exceptions import (
    ConfigurationError,
    ConflictError,
    NavigaError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    current_request_id,
    request_id_var,
)
from app.middleware.security_headers import SECURITY_HEADERS, SecurityHeadersMiddleware
from app.routes import client_config, health, pages, saved_routes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Quiet third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Warn about missing optional settings (server still starts)
        3. Verify store connectivity; re-raise on failure so the server exits
        4. Optionally create tables

    Shutdown sequence:
        1. Dispose database engine
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Naviga8 Backend starting up...")

    for problem in settings.validate_required_for_production():
        logger.warning("Configuration: %s", problem)

    database: Database = app.state.database
    try:
        await database.verify_connection()
    except Exception as e:
        logger.critical("Database connection error: %s", str(e))
        raise
    logger.info("Database connected")

    if settings.db_auto_create:
        await database.create_tables()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Naviga8 Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 Bad Request
        NotFoundError / unmatched path           → 404 Not Found
        ConflictError                            → 409 Conflict
        ConfigurationError                       → 500 (message names the problem)
        StoreError                               → 500 (generic message)
        NavigaError (base)                       → 500
        Exception (fallback)                     → 500 (stack trace logged)

    Handlers never put driver messages or stack traces in the response body.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body or query that does not fit the schema - same 400 as our own checks."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), errors)
        return _error_response(400, "validation_error", "Malformed request", {"errors": errors})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Framework-level HTTP errors, mainly unmatched paths and methods."""
        if exc.status_code == 404:
            return _error_response(404, "not_found", "Route not found")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "http_error",
                "message": str(exc.detail),
                "request_id": request_id_var.get(""),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, "conflict", exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("[%s] Configuration error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "configuration_error", exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """Store failure - generic message to the client, details logged server-side."""
        logger.error("[%s] Store error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(NavigaError)
    async def handle_app_error(request: Request, exc: NavigaError):
        logger.error("[%s] Application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", "Something went wrong!")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in ServerErrorMiddleware, outside the header middlewares
        rid = current_request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        response = JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "Something went wrong!",
                "request_id": rid,
            },
        )
        response.headers.update(SECURITY_HEADERS)
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Store to use. Defaults to a Database on settings.database_url.
                  Tests pass an in-memory SQLite Database here.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Naviga8 API",
        description=(
            "Save, list and delete origin/destination routes for anonymous map users, "
            "and bootstrap the map client with its Maps key and a user id."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.database = database or Database()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → SecurityHeaders → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(saved_routes.router)
    app.include_router(client_config.router)
    app.include_router(health.router)
    app.include_router(pages.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on settings.host:port."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
