"""Main module of the FastAPI application.

Serves the internal usage/plan routes and the payment-provider webhook.
Host applications that only need enforcement import ``require_limit``
and ``register_exception_handlers`` instead of mounting this app.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from plangate.api import billing, plans, usage
from plangate.api.exception_handlers import register_exception_handlers
from plangate.core.config import settings
from plangate.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the DI container on startup; release shared clients on shutdown."""
    from plangate.core import container as container_mod
    from plangate.core.container import initialize_container
    from plangate.core.redis_client import redis_client

    if container_mod.container is None:
        logger.info("Initializing dependency injection container...")
        initialize_container(settings)
        logger.info("Container initialized successfully")

    yield

    await redis_client.close()


def create_app() -> FastAPI:
    """Build the application with routers and exception handlers registered."""
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.include_router(usage.router)
    app.include_router(plans.router)
    app.include_router(billing.router)
    register_exception_handlers(app)
    return app


app = create_app()
