"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schoolhub.api import audit, auth, health, student_distribution, students
from schoolhub.core.database import init_db
from schoolhub.core.settings import settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting SchoolHub application...")

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Application stopped")


# Create FastAPI app
app = FastAPI(
    title="SchoolHub",
    description="Teaching-center back office: weekly student distribution",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(student_distribution.router, prefix="/api")
app.include_router(students.router, prefix="/api")
app.include_router(audit.router, prefix="/api")


if __name__ == "__main__":
    import os

    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "schoolhub.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.env == "dev",
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
