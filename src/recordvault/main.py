"""FastAPI application factory.

Learn: create_app() is the one place where long-lived collaborators are
built: the store engine (+ session factory) and the CredentialService
holding the signing key. They live on app.state and reach handlers
through dependencies, so nothing reads env vars or globals per request,
and tests can hand in their own settings and engine.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from recordvault import __version__
from recordvault.api import api_router
from recordvault.auth.credentials import CredentialService
from recordvault.config import Settings, get_settings
from recordvault.db.engine import build_engine, build_session_factory
from recordvault.db.models import create_all
from recordvault.errors import InternalError, RecordVaultError, UnauthorizedError
from recordvault.logging_config import configure_logging
from recordvault.middleware.request_id import RequestIdMiddleware
from recordvault.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)
    logger.info(
        "recordvault.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    await create_all(app.state.engine)

    yield

    logger.info("recordvault.shutdown")
    await app.state.engine.dispose()


# ─── Error handlers ──────────────────────────────────────


def _error_response(exc: RecordVaultError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def handle_domain_error(request: Request, exc: RecordVaultError) -> JSONResponse:
    return _error_response(exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Missing/mistyped body fields → 400 {message}, like other validation errors."""
    problems = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        problems.append(f"{field}: {err.get('msg', 'invalid')}")
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request: " + "; ".join(problems)},
    )


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the same {message} shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store.error", path=request.url.path, error=str(exc))
    return _error_response(InternalError())


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("http.unhandled_error", path=request.url.path)
    return _error_response(InternalError())


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    engine = engine or build_engine(settings)

    app = FastAPI(
        title="RecordVault",
        description=(
            "Personal records manager. Note: record secrets are stored "
            "and returned in plain text."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.credentials = CredentialService.from_settings(settings)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RecordVaultError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: recordvault.main:app)
app = create_app()
