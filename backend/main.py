"""
Timeblock Scheduler - Main Application Entry Point

Schedules pending tasks into concrete time blocks around working hours and
existing calendar commitments.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Timeblock Scheduler in {settings.ENVIRONMENT} mode...")

    if settings.is_local:
        from app.infrastructure.local.database import init_db

        await init_db()

    yield

    # Shutdown
    logger.info("Shutting down Timeblock Scheduler...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Timeblock Scheduler",
        description="Priority- and deadline-aware task-to-timeblock scheduling",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from app.api import events, scheduling, tasks

    app.include_router(scheduling.router, prefix="/api/scheduling", tags=["scheduling"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(events.router, prefix="/api/events", tags=["events"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
