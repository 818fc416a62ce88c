"""
Snafles Mock API

FastAPI application entry point.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from .schemas import HealthResponse
from .routes import auth, products, vendors, users, admin, vendor_analytics, uploads
from .middleware import (
    setup_cors,
    setup_rate_limiting,
    setup_logging,
    setup_exception_handlers,
    error_handler_middleware,
    RateLimitConfig,
    LoggingConfig,
    get_cors_config,
)
from .dependencies import (
    DEFAULT_JWT_SECRET,
    get_settings,
    init_services,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown. State is built in create_app."""
    settings = app.state.settings
    logger.info(
        f"Snafles mock API started in {settings.environment} mode "
        f"(frontend: {settings.frontend_url})"
    )
    try:
        yield
    finally:
        logger.info("Shutting down Snafles mock API; in-memory data is discarded")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application with its own in-memory data.
    """
    if settings is None:
        settings = get_settings()

    if settings.jwt_secret == DEFAULT_JWT_SECRET and not settings.is_development:
        logger.warning("JWT_SECRET is not set; using the built-in development secret")

    app = FastAPI(
        title="Snafles Mock API",
        description="Mock e-commerce backend for frontend development.",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.services = init_services(settings)
    app.state.started_at = time.time()

    # ==========================================================================
    # Middleware (last added = outermost)
    # ==========================================================================

    # 1. Catch-all for errors the exception handlers did not translate
    setup_exception_handlers(app)
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    # 2. Rate limiting
    if settings.rate_limit_enabled:
        setup_rate_limiting(
            app,
            config=RateLimitConfig(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
                enabled=settings.rate_limit_enabled,
            ),
        )

    # 3. CORS (so error and 429 responses carry CORS headers too)
    setup_cors(
        app,
        config=get_cors_config(settings.environment, frontend_url=settings.frontend_url),
    )

    # 4. Logging (outermost - sees every response)
    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=not settings.is_development,
    )

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api"

    for module in (auth, products, vendors, users, admin, vendor_analytics, uploads):
        app.include_router(module.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Snafles Mock API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get(f"{api_prefix}/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(
            status="OK",
            timestamp=datetime.now(timezone.utc),
            uptime=round(time.time() - app.state.started_at, 3),
            message="Mock API Server Running",
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import os
    import uvicorn

    settings = get_settings()

    # One worker: every worker would hold its own copy of the data
    uvicorn.run(
        "snafles.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        reload=settings.debug,
        workers=1,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
