"""
User Service - Application Factory & Bootstrap
==============================================

What:  Builds the FastAPI application and runs the startup sequence.
How:   `create_app(settings, database)` wires middleware, exception handlers,
       routers and the static mount around an already-built database gateway.
       `main()` is the process entry point:

           load_settings() ──▶ Database.from_settings() ──▶ init_schema()
                  │                      │                        │
                  └──── StartupError ────┴────────────────────────┘
                                         │
                                 log + exit status 1

       Only `main()` decides to terminate the process; every lower layer
       raises, which keeps them testable without process-exit side effects.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware:   Request ID -> Access log             │
    │  Routes:       GET /   GET /health   /api/users     │
    │  Static:       /static/* (StaticFiles)              │
    │  Errors:       Malformed/Validation->400  DB->500   │
    └─────────────────────────────────────────────────────┘
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from user_api import __version__
from user_api.config import Settings, load_settings
from user_api.database import Database
from user_api.exceptions import (
    ConfigurationError,
    DatabaseError,
    MalformedPayloadError,
    NotFoundError,
    StartupError,
    ValidationError,
)
from user_api.middleware.logging import RequestLoggingMiddleware
from user_api.middleware.request_id import RequestIDMiddleware, request_id_var
from user_api.routes import health, pages, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Called twice by main(): once with the default level so that config
    errors are visible, then again with the configured level.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup work that can fail (config, schema) happens in serve() before the
    app exists. The lifespan only announces readiness and releases the pool.
    """
    settings: Settings = app.state.settings
    logger.info("User Service ready on http://%s:%s", settings.app_host, settings.app_port)

    yield

    logger.info("User Service shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to `{"error": message}` responses.

        MalformedPayloadError -> 400
        ValidationError       -> 400
        NotFoundError         -> 404
        DatabaseError         -> 500 (context logged, never returned)
        Exception             -> 500 (stack trace logged)
    """

    @app.exception_handler(MalformedPayloadError)
    async def handle_malformed_payload(request: Request, exc: MalformedPayloadError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed payload: %s", rid, exc.context.get("errors"))
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error (%s): %s", rid, exc.kind, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Settings, database: Database) -> FastAPI:
    """
    Assemble the application around a settings record and a gateway.

    Nothing here touches the network; the gateway must already have its
    schema in place. Tests pass a SQLite-backed Database or a mock.
    """
    app = FastAPI(
        title="User Service API",
        description="Create and list users stored in PostgreSQL.",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Last added runs first: RequestID -> Logging -> route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(health.router)
    app.include_router(users.router)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    else:
        logger.warning("Static directory %s not found; /static is disabled", static_dir.resolve())

    return app


# ══════════════════════════════════════════════════════════════════════════
# Bootstrap
# ══════════════════════════════════════════════════════════════════════════

async def serve(settings: Settings) -> None:
    """
    Connect, initialize the schema, then run uvicorn until shutdown.

    Raises:
        StartupError: Invalid listen port, unusable connection settings, or
        a failing schema script. Nothing is served in that case.
    """
    try:
        port = int(settings.app_port)
    except ValueError as e:
        raise ConfigurationError(f"Invalid app_port: {settings.app_port!r}") from e

    database = Database.from_settings(settings)
    try:
        await database.init_schema(settings.init_script)
    except StartupError:
        await database.dispose()
        raise

    app = create_app(settings, database)
    config = uvicorn.Config(
        app,
        host=settings.app_host,
        port=port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    """Process entry point (`python -m user_api` / `user-api`)."""
    setup_logging()
    try:
        settings = load_settings()
        setup_logging(settings.log_level)
        asyncio.run(serve(settings))
    except StartupError as e:
        logger.critical("Startup failed: %s", e.message)
        sys.exit(1)
