"""Main FastAPI application for the GAC referrers API."""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from gac import __version__
from gac.api.responses import error
from gac.api.v1.referrer_types import router as referrer_types_router
from gac.api.v1.referrers import router as referrers_router
from gac.errors import ApiError, MethodNotAllowedError, NotFoundError
from gac.logging_config import configure_logging, get_logger
from gac.settings import settings
from gac.storage.db import Database, db
from gac.storage.repo import ReferrerTypeStore

logger = get_logger(__name__)

_ROUTING_ERRORS = {
    404: lambda: NotFoundError("Not found"),
    405: lambda: MethodNotAllowedError("Method not allowed"),
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request id, method and path into every log line of the request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response


def initialize_database(database: Database) -> None:
    """Create tables and seed the default referrer types once."""
    database.create_tables()
    if settings.seed_default_referrer_types:
        with database.session() as session:
            created = ReferrerTypeStore(session).ensure_defaults()
        logger.info("referrer_types_ready", seeded=created)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("app_starting", env=settings.env)
    initialize_database(db)

    yield

    logger.info("app_shutting_down")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("request_failed", message=exc.message)
        else:
            logger.info(
                "request_rejected",
                status=exc.status_code,
                message=exc.message,
            )
        return error(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        routing_error = _ROUTING_ERRORS.get(exc.status_code)
        if routing_error:
            return await api_error_handler(request, routing_error())
        return error(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            message = f"Invalid value for {field}: {first.get('msg')}"
        else:
            message = "Invalid request"
        return error(message, 400)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error")
        return error("Internal server error", 500)


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app
    """
    configure_logging()
    is_production = settings.env == "production"

    app = FastAPI(
        title="GAC Referrers API",
        description="Referrers and referrer types for the GAC client/job management system",
        version=__version__,
        docs_url=None if is_production else "/docs",
        redoc_url=None,
        openapi_url=None if is_production else "/openapi.json",
        lifespan=lifespan,
    )

    allowed_origins = [
        origin.strip()
        for origin in settings.allowed_origins.split(",")
        if origin.strip()
    ]
    if is_production and "*" in allowed_origins:
        logger.error("cors_wildcard_blocked", message="Wildcard CORS not allowed in production")
        allowed_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        max_age=3600,
    )

    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(referrers_router)
    app.include_router(referrer_types_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "env": settings.env,
        }

    return app


# Create app instance
app = create_app()
