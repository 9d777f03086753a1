"""FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from newsfront.api.health import router as health_router
from newsfront.api.posts import router as posts_router
from newsfront.api.search import router as search_router
from newsfront.api.site import router as site_router
from newsfront.api.sitemaps import router as sitemaps_router
from newsfront.api.taxonomy import router as taxonomy_router
from newsfront.config import Settings
from newsfront.exceptions import ConfigurationError, InternalServerError
from newsfront.gateway.client import close_client, init_client
from newsfront.middleware.edge import EdgePolicyMiddleware
from newsfront.services.env_validation import validate_env_or_throw
from newsfront.services.security_policy import csp_policy_for

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.INFO if debug else logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: refuse to start on bad configuration."""
    settings: Settings = app.state.settings
    _configure_logging(settings.debug)

    try:
        validate_env_or_throw(settings.env_mapping())
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        raise

    logger.info(
        "Starting NewsFront (environment=%s, debug=%s)", settings.environment, settings.debug
    )
    init_client(settings)

    yield

    try:
        await close_client()
    except Exception as exc:
        logger.error("Error during GraphQL client shutdown: %s", exc, exc_info=True)

    logger.info("NewsFront stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    docs_enabled = settings.debug

    app = FastAPI(
        title="NewsFront",
        description="Content delivery and edge policy layer for a headless news site",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=500)
    # Added last so it is the outermost layer and sees every request first.
    app.add_middleware(
        EdgePolicyMiddleware,
        csp_policy=csp_policy_for(settings.wpgraphql_endpoint),
    )

    app.include_router(health_router)
    app.include_router(site_router)
    app.include_router(posts_router)
    app.include_router(taxonomy_router)
    app.include_router(search_router)
    app.include_router(sitemaps_router)

    # Global exception handlers

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = err.get("loc", ())
            field = str(loc[-1]) if loc else "unknown"
            errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        logger.warning(
            "RequestValidationError in %s %s: %s",
            request.method,
            request.url.path,
            errors,
        )
        return JSONResponse(status_code=422, content={"detail": errors})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.critical(
            "ConfigurationError in %s %s: %s", request.method, request.url.path, exc
        )
        return JSONResponse(
            status_code=503,
            content={"detail": "Service misconfigured"},
        )

    @app.exception_handler(InternalServerError)
    async def internal_server_error_handler(
        request: Request, exc: InternalServerError
    ) -> JSONResponse:
        logger.error(
            "InternalServerError in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.error("ValueError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        message = str(exc) or "Invalid value"
        return JSONResponse(
            status_code=422,
            content={"detail": message},
        )

    return app


app = create_app()


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(
        "newsfront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        lifespan="on",
        server_header=False,
    )
