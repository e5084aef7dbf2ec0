# uasniffer/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from uasniffer.config import settings
from uasniffer.keywords import get_keyword_table
from uasniffer.routes import router
import logging

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""

    # Startup
    logger.info("Starting UA Sniffer API...")

    # Load the keyword table, a broken table must prevent startup
    table = get_keyword_table()
    logger.info(f"Loaded {len(table)} User-Agent keywords from {table.source}")

    logger.info("UA Sniffer API ready")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title="UA Sniffer API",
    description="Classifies User-Agent strings into browser, rendering engine, operating system and device",
    version="1.0.0",
    lifespan=lifespan,
)

# Register routes
app.include_router(router)
