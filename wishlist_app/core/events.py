"""
Application lifecycle events
Handles startup and shutdown tasks
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from .logging import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Creates the schema on startup when DATABASE_AUTO_CREATE is set and
    disposes the database engine on shutdown.
    """
    settings = app.state.settings
    database = app.state.db

    try:
        setup_logging(settings)
        logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

        if settings.DATABASE_AUTO_CREATE:
            await database.create_all()

        logger.info(f"{settings.APP_NAME} started successfully")

        yield

    finally:
        logger.info(f"Shutting down {settings.APP_NAME}...")
        await database.close()
        logger.info(f"{settings.APP_NAME} shutdown complete")
