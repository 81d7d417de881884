"""
Pytest configuration and fixtures for the Upkeep tests.

Provides test settings, a recording stand-in for the maintenance services,
schedulers that are shut down after each test, and an HTTP test client.
"""

import sys
import threading
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add parent directory to path to import upkeep modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from upkeep.config import Settings
from upkeep.main import create_app
from upkeep.tasks.registry import DEFAULT_INTERVALS, build_task_bodies
from upkeep.tasks.scheduler import TaskScheduler


# ============================================================================
# Test Configuration
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Provide test-specific settings."""
    return Settings(
        DEBUG=True,
        ADMIN_API_TOKEN="",
        TASK_SCHEDULE={},
        SCHEDULER_TIMEZONE="UTC",
        SCHEDULER_MAX_WORKERS=4,
    )


class RecordingMaintenance:
    """Maintenance services that count calls instead of touching storage."""

    def __init__(self):
        self.calls: dict[str, int] = {
            "cleanup_tokens": 0,
            "refresh_arr_queues": 0,
            "cleanup_images": 0,
        }
        self._lock = threading.Lock()

    def _called(self, method: str):
        with self._lock:
            self.calls[method] += 1

    def cleanup_tokens(self):
        self._called("cleanup_tokens")
        return 0

    def refresh_arr_queues(self):
        self._called("refresh_arr_queues")

    def cleanup_images(self):
        self._called("cleanup_images")
        return 0


@pytest.fixture
def maintenance() -> RecordingMaintenance:
    return RecordingMaintenance()


# ============================================================================
# Scheduler Fixtures
# ============================================================================

@pytest.fixture
def scheduler() -> TaskScheduler:
    """Provide an uninitialized scheduler, shut down after the test."""
    sched = TaskScheduler(max_workers=4)
    yield sched
    sched.shutdown(wait=False)


@pytest.fixture
def running_scheduler(scheduler: TaskScheduler, maintenance: RecordingMaintenance) -> TaskScheduler:
    """Provide a scheduler running the built-in tasks with default intervals."""
    scheduler.initialize(build_task_bodies(maintenance), {}, DEFAULT_INTERVALS)
    return scheduler


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest.fixture
def app(maintenance: RecordingMaintenance, test_settings: Settings):
    """Provide the application without running its lifespan."""
    return create_app(maintenance, test_settings)


@pytest_asyncio.fixture
async def client(app, running_scheduler: TaskScheduler) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide HTTP test client.

    The running scheduler is attached directly to app state so tests don't
    depend on the lifespan.
    """
    app.state.scheduler = running_scheduler

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


def pytest_configure(config):
    """
    Configure pytest markers.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
