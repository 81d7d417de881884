"""Built-in maintenance tasks and their default intervals."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from upkeep.services.maintenance_protocol import MaintenanceServices


WorkFunction = Callable[[], None]

CLEANUP_TOKENS = "Cleanup Tokens"
REFRESH_ARR_QUEUES = "Refresh Arr Queues"
CLEANUP_IMAGES = "Cleanup Images"

# Registration order
DEFAULT_INTERVALS: dict[str, timedelta] = {
    CLEANUP_TOKENS: timedelta(seconds=60),
    REFRESH_ARR_QUEUES: timedelta(seconds=60),
    CLEANUP_IMAGES: timedelta(hours=24),
}


@dataclass(frozen=True)
class TaskDefinition:
    """A task name paired with the work it runs.

    The same work function is reused every time the task is rescheduled.
    """

    name: str
    func: WorkFunction


def build_task_bodies(services: MaintenanceServices) -> dict[str, WorkFunction]:
    """
    Bind each built-in task to the shared maintenance services.

    Args:
        services: Handle to the storage, queue and image subsystems the
            jobs operate on

    Returns:
        Work function for each task name in DEFAULT_INTERVALS
    """
    from upkeep.tasks.arr_queue_refresh import make_arr_queue_refresh_job
    from upkeep.tasks.image_cleanup import make_image_cleanup_job
    from upkeep.tasks.token_cleanup import make_token_cleanup_job

    return {
        CLEANUP_TOKENS: make_token_cleanup_job(services),
        REFRESH_ARR_QUEUES: make_arr_queue_refresh_job(services),
        CLEANUP_IMAGES: make_image_cleanup_job(services),
    }
