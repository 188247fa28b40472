"""
FastAPI application exposing the privileged filesystem over HTTP.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from privfs.api.routers import router as api_router
from privfs.config.settings import settings
from privfs.container import container

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Get logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down, closing privileged session")
    container.close()


# Create FastAPI app
app = FastAPI(title="Privileged Filesystem API", lifespan=lifespan)
app.include_router(api_router)
