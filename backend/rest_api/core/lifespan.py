"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine, get_db_context
from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from rest_api.models import Base
from rest_api.seed import seed


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with an unsafe configuration."
            )
        logger.warning("Running with unsafe defaults (acceptable for development only)")

    logger.info(
        "Starting REST API",
        port=settings.rest_api_port,
        env=settings.environment,
        permission_registry=settings.permission_registry_version,
        location_cache_ttl=settings.location_cache_ttl_seconds,
        trust_principal_headers=settings.trust_principal_headers,
    )

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    if settings.seed_demo_data:
        with get_db_context() as db:
            seed(db)

    yield

    logger.info("Shutting down REST API")
    engine.dispose()
