"""
TeachFlow - Main Application Entry Point
Business management backend for independent teachers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import structlog

from teachflow import __version__
from teachflow.core.config import get_settings
from teachflow.api import auth, classes, contractors, dashboard, payments, students

settings = get_settings()

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO, format="%(message)s")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info(f"Initializing {settings.APP_NAME} backend")
    # Tables are created by Alembic migrations, not auto-generated
    logger.info("Database managed by Alembic migrations")

    yield

    logger.info("Shutting down TeachFlow backend")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Classes, students, contractors and payments for independent teachers",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

prefix = settings.API_V1_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
app.include_router(contractors.router, prefix=f"{prefix}/contractors", tags=["contractors"])
app.include_router(students.router, prefix=f"{prefix}/students", tags=["students"])
app.include_router(classes.router, prefix=f"{prefix}/classes", tags=["classes"])
app.include_router(payments.router, prefix=f"{prefix}/payments", tags=["payments"])
app.include_router(dashboard.router, prefix=f"{prefix}/dashboard", tags=["dashboard"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "teachflow-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "TeachFlow API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "teachflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
