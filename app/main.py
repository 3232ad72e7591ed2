"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Request context middleware (correlation id, secure headers, access log)
- Rate limiting (operation-class limiter and the slowapi default limit)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.core.config import Settings, settings
from app.interfaces.admin.router import router as admin_router
from app.interfaces.dependencies import Container, build_container
from app.interfaces.health import router as health_router
from app.interfaces.hiring.router import router as hiring_router
from app.interfaces.identity.router import router as identity_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import RequestContextMiddleware
from app.shared.security.rate_limiting import limiter

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the rate limiter sweep, and release resources on shutdown."""
    container: Container = app.state.container
    await container.rate_limiter.start()
    logger.info("%s %s started", container.settings.project_name, container.settings.version)

    yield

    await container.rate_limiter.stop()
    await container.close()


def create_app(
    config: Optional[Settings] = None, container: Optional[Container] = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and middleware.

    Args:
        config: Settings to use. Defaults to the environment settings.
        container: Prebuilt collaborators, mainly for tests. Built from
            ``config`` when omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    config = config or settings
    configure_logging(level=config.log_level)

    app = FastAPI(
        title=config.project_name,
        version=config.version,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
        lifespan=lifespan,
    )
    app.state.container = container or build_container(config)

    # --- Rate Limiting ---
    app.state.limiter = limiter

    # --- Middleware ---
    app.add_middleware(RequestContextMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(identity_router, prefix=API_PREFIX)
    app.include_router(hiring_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)

    return app


app = create_app()
