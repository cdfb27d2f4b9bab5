"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import settings
from backend.database import create_db_and_tables
from backend.utils.logging import setup_logging
from backend.api import auth, journal, dashboard, system

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    logger.info(f"Trade journal ready (default balance {settings.starting_balance} {settings.currency})")
    yield


app = FastAPI(
    title="Trade Journal",
    description="Personal trading journal with performance analytics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth.router)
app.include_router(journal.router)
app.include_router(dashboard.router)
app.include_router(system.router)
