"""FastAPI application entry point."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from upkeep.api.routes import tasks as tasks_routes
from upkeep.config import Settings, get_settings
from upkeep.services.maintenance_protocol import MaintenanceServices
from upkeep.tasks.exceptions import SchedulerStartupError
from upkeep.tasks.registry import DEFAULT_INTERVALS, build_task_bodies
from upkeep.tasks.scheduler import TaskScheduler
from upkeep.version import VERSION


# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# APScheduler logs every job run at INFO (too verbose)
logging.getLogger('apscheduler.executors.default').setLevel(logging.WARNING)
logging.getLogger('apscheduler.scheduler').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_app(services: MaintenanceServices, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        services: Maintenance subsystems the scheduled tasks run against.
            Must be ready (storage connected) before the app starts.
        settings: Settings to use instead of the environment

    Returns:
        FastAPI application whose lifespan runs the task scheduler
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown events."""
        # Startup
        logger.info("Upkeep v%s starting...", VERSION)
        if settings.TASK_SCHEDULE:
            logger.info("  Task schedule overrides: %s", settings.TASK_SCHEDULE)

        scheduler = TaskScheduler.from_settings(settings)
        logger.info("  Task scheduler: Starting...")
        try:
            scheduler.initialize(
                build_task_bodies(services),
                settings.TASK_SCHEDULE,
                DEFAULT_INTERVALS,
            )
            app.state.scheduler = scheduler
            logger.info("  Task scheduler: Started successfully")
        except SchedulerStartupError as e:
            logger.error("  Task scheduler: Failed to start - %s", e)
            # Don't fail startup; the API reports the scheduler as down
            app.state.scheduler = None

        yield  # Application runs

        # Shutdown
        logger.info("Upkeep shutting down...")
        if app.state.scheduler is not None:
            # Waits for running job bodies; keep it off the event loop
            await asyncio.to_thread(app.state.scheduler.shutdown)
            logger.info("  Task scheduler: Stopped")

    app = FastAPI(
        title="Upkeep",
        description="Recurring maintenance task scheduler",
        version=VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.scheduler = None
    app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(tasks_routes.router)

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        scheduler = request.app.state.scheduler
        return {
            "status": "healthy",
            "scheduler_running": scheduler is not None and scheduler.running,
        }

    return app
