# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Learning Demo API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Request flow:
#   CORS (documentation path only) -> request/response logging -> router
#
# Usage:
#   uvicorn app.main:app --reload
#   learning-demo                     # binds API_HOST:API_PORT
#   DEBUG=true uvicorn app.main:app   # enables request/response logging
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.config import Settings, settings as default_settings
from app.exceptions import unexpected_exception_handler
from app.middleware import RequestResponseLoggingMiddleware, UrlBasedCorsMiddleware
from app.routers import health, items

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if default_settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings = default_settings) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to the environment-loaded ones)

    Returns:
        FastAPI: The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Logs the effective configuration on startup and a line on shutdown.
        """
        logger.info(f"Starting {settings.API_TITLE} in {settings.ENVIRONMENT} mode")
        logger.info(f"API docs at {settings.OPENAPI_URL} (UI: {settings.DOCS_URL})")
        if not logging.getLogger("app.middleware.request_logging").isEnabledFor(logging.DEBUG):
            logger.info("Request/response logging inactive (set DEBUG=true to enable)")

        yield

        logger.info(f"Shutting down {settings.API_TITLE}")

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        openapi_url=settings.OPENAPI_URL,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Items",
                "description": "Static test item",
            },
            {
                "name": "Health",
                "description": "API health checks",
            },
        ],
    )

    # =========================================================================
    # Middleware
    # =========================================================================
    # The last middleware added runs first, so CORS is consulted before
    # the logging middleware sees the request.

    app.add_middleware(RequestResponseLoggingMiddleware, config=settings.request_logging)
    app.add_middleware(UrlBasedCorsMiddleware, rules=settings.cors_rules)

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        return await unexpected_exception_handler(request, exc)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(items.router, tags=["Items"])
    app.include_router(health.router, tags=["Health"])

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on API_HOST:API_PORT."""
    import uvicorn

    uvicorn.run(app, host=default_settings.API_HOST, port=default_settings.API_PORT)


if __name__ == "__main__":
    run()
