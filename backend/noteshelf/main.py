"""
NoteShelf Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires an explicitly constructed NoteStore,
       middleware, exception handlers and routes into a FastAPI instance.
Who:   Called by uvicorn (`uvicorn noteshelf.main:app`), by the `noteshelf`
       console script, and by the test suite with its own store.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes (at /api and at the root):                  │
    │  GET/POST /notes      PUT/DELETE /notes/{note_id}   │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ NotFound/Route→404 │ Store→500    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, initialize the store (fatal on failure)
    Shutdown: close the store
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from noteshelf import __version__
from noteshelf.config import Settings, settings
from noteshelf.database import NoteStore
from noteshelf.exceptions import (
    MalformedBodyError,
    NotFoundError,
    PersistenceError,
    RouteError,
    StoreInitializationError,
    ValidationError,
)
from noteshelf.middleware.logging import RequestLoggingMiddleware
from noteshelf.middleware.request_id import RequestIDMiddleware, request_id_var
from noteshelf.routes import notes
from noteshelf.services.note_service import REQUIRED_FIELDS_MESSAGE

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings = settings) -> None:
    """
    Configure application logging once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] noteshelf.database: Note store ready: ...
    """
    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the note store on startup and close it on shutdown.

    A StoreInitializationError is logged and re-raised: the server, not this
    module, decides to terminate the process.
    """
    setup_logging(app.state.settings)
    store: NoteStore = app.state.store

    logger.info("NoteShelf Backend %s starting up...", __version__)
    try:
        await store.initialize()
    except StoreInitializationError as e:
        logger.critical("Startup aborted: %s | Context: %s", e.message, e.context)
        raise

    logger.info(
        "Server ready at http://%s:%d",
        app.state.settings.host,
        app.state.settings.port,
    )

    yield

    logger.info("NoteShelf Backend shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception taxonomy to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError / MalformedBodyError  → 400
        RequestValidationError (FastAPI)      → 400 (translated, see below)
        NotFoundError                         → 404
        RouteError / unmatched route or verb  → 404
        PersistenceError                      → 500 (details logged only)
        Exception (fallback)                  → 500 (traceback logged only)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        Translate FastAPI's body parsing errors into our taxonomy.

        An unparseable body becomes MalformedBodyError; a body of the wrong
        shape (not an object, or a non-string field) becomes ValidationError.
        """
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            return await handle_validation_error(request, MalformedBodyError())

        loc = errors[0].get("loc", ()) if errors else ()
        field = str(loc[-1]) if len(loc) > 1 else None
        if field is None or field in ("title", "description"):
            error = ValidationError(message=REQUIRED_FIELDS_MESSAGE, field=field)
        else:
            error = ValidationError(message=f"Invalid value for '{field}'", field=field)
        return await handle_validation_error(request, error)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(RouteError)
    async def handle_route_error(request: Request, exc: RouteError):
        rid = request_id_var.get("")
        logger.warning("[%s] No route for %s %s", rid, request.method, request.url.path)
        return _error_response(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Unmatched paths (404) and unsupported methods (405) both read as an
        unknown route. FastAPI raises a bare 400 when the body cannot be
        decoded at all (e.g. invalid UTF-8), which is a malformed body too.
        """
        if exc.status_code in (404, 405):
            return await handle_route_error(request, RouteError())
        if exc.status_code == 400:
            return await handle_validation_error(request, MalformedBodyError())
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        """Store failure: generic message to the client, engine error logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Persistence error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[NoteStore] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: NoteStore to serve from. Defaults to one built from settings;
               it is initialized by the lifespan handler, not here.
        app_settings: Settings override (tests); defaults to the singleton.

    Returns:
        Fully configured FastAPI instance.
    """
    app_settings = app_settings or settings
    if store is None:
        store = NoteStore(
            app_settings.database_url,
            echo=app_settings.log_level == "DEBUG",
        )

    app = FastAPI(
        title="NoteShelf API",
        description="Create, search, update and delete text notes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # /api/notes is what the web client calls; /notes is the same API unprefixed
    app.include_router(notes.router, prefix="/api")
    app.include_router(notes.router, include_in_schema=False)

    return app


# Module-level instance for `uvicorn noteshelf.main:app`
app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured host and PORT."""
    uvicorn.run(
        "noteshelf.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
