"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from crux_analytics import __version__
from crux_analytics.config import get_settings
from crux_analytics.api import router as api_router
from crux_analytics.db.database import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started (%s)", settings.app_name, settings.app_env)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Financial case analysis: ROI, NPV, IRR, payback, break-even and sensitivity",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}
