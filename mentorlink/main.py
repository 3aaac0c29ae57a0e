# mentorlink/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from .config import get_settings
from .database import create_db_and_tables, check_database_health, dispose_engine
from .routers import mentorship_router

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application on startup"""
    logger.info("Application startup event triggered.")
    try:
        await create_db_and_tables()
        logger.info("Startup sequence completed successfully.")
    except Exception as e:
        logger.critical(f"Critical error during startup: {e}", exc_info=True)
    yield
    await dispose_engine()

app = FastAPI(
    title="Mentorship Lifecycle API",
    description="Requests, acceptance, rejection and archiving of student mentorships.",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(mentorship_router.router)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return await check_database_health()
