"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Everything that
depends on settings is built here and stored on app.state: the database
engine and session factory, the AuthGuard (signing secret and API key)
and the file server hit counter. Nothing request-facing reads globals.
Middleware, CORS, error handling, routers and the static mount are all
registered here.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from chirpy import __version__
from chirpy.api import admin_router, api_router
from chirpy.auth.guard import AuthGuard
from chirpy.config import Settings, settings as default_settings
from chirpy.db.engine import build_engine, build_session_factory
from chirpy.errors import AuthenticationError, ChirpyError, ErrorKind
from chirpy.middleware.metrics import STATIC_PREFIX, FileserverHitsMiddleware, HitCounter

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    cfg: Settings = app.state.settings
    logger.info(
        "chirpy.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
    )

    yield

    logger.info("chirpy.shutdown")
    await app.state.engine.dispose()


async def handle_chirpy_error(request: Request, exc: ChirpyError) -> JSONResponse:
    """Map a ChirpyError to its status with a generic body.

    The precise reason (str(exc), the exception class) is only logged.
    """
    if exc.kind is ErrorKind.INTERNAL:
        logger.error(
            "request.failed",
            reason=type(exc).__name__,
            detail=str(exc),
            exc_info=exc.__cause__ or exc,
        )
    else:
        event = "auth.rejected" if exc.kind is ErrorKind.UNAUTHENTICATED else "request.rejected"
        logger.info(event, kind=exc.kind.value, reason=type(exc).__name__, detail=str(exc))

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": exc.challenge}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message},
        headers=headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Undecodable request bodies get the same terse envelope as other errors.

    Only the offending field locations are logged, never the submitted values.
    """
    logger.info(
        "request.rejected",
        kind=ErrorKind.BAD_REQUEST.value,
        reason="RequestValidationError",
        fields=[".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()],
    )
    return JSONResponse(status_code=400, content={"error": "Bad Request"})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    cfg = app_settings or default_settings

    app = FastAPI(
        title="Chirpy",
        description="Short posts, with sessions and ownership checks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.engine = build_engine(cfg.database_url, echo=cfg.debug)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.auth_guard = AuthGuard.from_settings(cfg)
    app.state.fileserver_hits = HitCounter()

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → FileserverHits → handler

    from chirpy.middleware.request_id import RequestIdMiddleware
    from chirpy.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(FileserverHitsMiddleware, counter=app.state.fileserver_hits)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(ChirpyError, handle_chirpy_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(api_router)
    app.include_router(admin_router, tags=["admin"])

    static_dir = Path(cfg.static_dir)
    if static_dir.is_dir():
        app.mount(STATIC_PREFIX, StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning("static.missing", directory=str(static_dir))

    return app


# Default app instance (used by uvicorn: chirpy.main:app)
app = create_app()
