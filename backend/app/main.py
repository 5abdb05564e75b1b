"""
WordLog Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Lifecycle:
    Startup:
    1. Initialize logging
    2. Report missing configuration (the server still starts)
    3. Create the MongoConnection handle (connects lazily on first request)

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings
from app.database import MongoConnection
from app.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import health, words

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(app_settings: Settings):
    """Return a lifespan context manager bound to the given settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(app_settings.log_level)
        logger.info("WordLog Backend %s starting up...", __version__)

        try:
            app_settings.validate_required_for_production()
        except ValueError as e:
            # Keep serving: /health reports the problem and data routes
            # answer with a configuration_error body.
            logger.error("Configuration error: %s", str(e))

        app.state.mongo = MongoConnection(app_settings)
        logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("WordLog Backend shutting down...")
        app.state.mongo.close()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        ConfigurationError       → 500 Internal Server Error
        DatabaseConnectionError  → 503 Service Unavailable
        DatabaseError            → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Only validation details are returned to the client; everything else is
    logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input — tell them which fields and rules failed."""
        logger.warning(
            "[%s] Validation error on %s: %s",
            request_id_var.get(""),
            ", ".join(exc.fields) or "request",
            exc.message,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("[%s] Configuration error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "configuration_error",
                "The server is not configured to reach its database.",
            ),
        )

    @app.exception_handler(DatabaseConnectionError)
    async def handle_connection_error(request: Request, exc: DatabaseConnectionError):
        logger.error(
            "[%s] Database unreachable: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body("service_unavailable", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Database error — generic message to user, details logged server-side."""
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace goes to the log, never to the client."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="WordLog API",
        description=(
            "Records word-frequency observations from interview transcripts: "
            "who was interviewed, which word, how often, and in which category."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=build_lifespan(app_settings),
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(words.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
