"""
FastAPI application factory.

Creates and configures the FastAPI app with all routes,
middleware, and dependency injection from the shared Container.
"""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.exceptions import StatsError
from shared.container import Container
from shared.logging.correlation import set_correlation_id, generate_correlation_id
from presentation.api.dependencies import set_container
from presentation.api.routes import health, stats

logger = logging.getLogger(__name__)


def error_body(exc: StatsError) -> dict:
    body = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return body


def create_app(container: Container) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: DI container with all services initialized.

    Returns:
        Configured FastAPI application.
    """
    # Wire container into FastAPI dependency system
    set_container(container)

    app = FastAPI(
        title="Server Stats API",
        description=(
            "Normalized CPU, memory, disk and top-process figures for one server, "
            "read from Netdata, node_exporter or SSH.\n\n"
            "**Authentication:** session JWT in `Authorization: Bearer` or the "
            "`session_token` cookie. Backends that run remote commands also require "
            "the session email to match `ALLOWED_EMAIL`."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    @app.exception_handler(StatsError)
    async def stats_error_handler(request: Request, exc: StatsError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path}: {exc.message} ({exc.details})")
        else:
            logger.info(f"{request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    # Correlation ID middleware for request tracing
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        # Accept correlation_id from header or generate new one
        cid = request.headers.get("X-Correlation-ID") or generate_correlation_id("api-")
        set_correlation_id(cid)
        response: Response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    # CORS middleware for the dashboard and Swagger UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_prefix = "/api"
    app.include_router(health.router, prefix=api_prefix)
    app.include_router(stats.router, prefix=api_prefix)

    logger.info(
        f"REST API configured: {len(app.routes)} routes, "
        f"docs at /docs, API at {api_prefix}"
    )

    return app
