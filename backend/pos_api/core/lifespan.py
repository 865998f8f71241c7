"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from pos_api.models import Base
from pos_api.seed import seed
from pos_shared.config.logging import api_logger as logger, setup_logging
from pos_shared.config.settings import settings
from pos_shared.infrastructure.db import SessionLocal, engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(f"Configuration errors: {'; '.join(config_errors)}")
        logger.warning("Running with invalid configuration (development only)")

    logger.info("Starting POS API", port=settings.rest_api_port, env=settings.environment)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    with SessionLocal() as db:
        seed(db)

    yield

    logger.info("Shutting down POS API")
    engine.dispose()
