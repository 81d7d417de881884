"""Scheduled task API routes (Admin-only)."""
import logging

from fastapi import APIRouter, Depends

from upkeep.api.exceptions import not_found, server_error
from upkeep.dependencies import get_scheduler, require_admin_token
from upkeep.schemas.task import (
    TaskListResponse,
    TaskRescheduleRequest,
    TaskResponse,
    TaskStatsResponse,
)
from upkeep.tasks.exceptions import TaskNotFoundError, TaskUpdateError
from upkeep.tasks.scheduler import JobInfo, TaskScheduler

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin/tasks",
    tags=["Scheduled Tasks (Admin)"],
    dependencies=[Depends(require_admin_token)],
)


def _to_response(job: JobInfo) -> TaskResponse:
    return TaskResponse(
        name=job.name,
        next_run=job.next_run_time,
        interval_seconds=job.interval_seconds,
    )


# Handlers are sync so scheduler locking runs in the threadpool, not on the event loop.

@router.get("", response_model=TaskListResponse)
def list_tasks(scheduler: TaskScheduler = Depends(get_scheduler)):
    """List all scheduled tasks with their next run times."""
    tasks = [_to_response(job) for job in scheduler.list_jobs()]
    return TaskListResponse(tasks=tasks, total=len(tasks))


@router.get("/stats", response_model=dict[str, TaskStatsResponse])
def get_task_stats(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Run and failure counts for each task that has run since startup."""
    return scheduler.get_stats()


@router.get("/{name}", response_model=TaskResponse)
def get_task(name: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Get a single scheduled task by name."""
    job = scheduler.get_job(name)
    if job is None:
        raise not_found("Task", name)
    return _to_response(job)


@router.put("/{name}", response_model=TaskResponse)
def reschedule_task(
    name: str,
    request: TaskRescheduleRequest,
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    """
    Reschedule a task to run every `seconds` seconds.

    The next run is `seconds` from now.
    """
    try:
        job = scheduler.reschedule(name, request.seconds)
    except TaskNotFoundError as e:
        raise not_found("Task", e.name)
    except TaskUpdateError as e:
        # Cause is already logged by the scheduler
        raise server_error(str(e))

    logger.info("Task %r rescheduled via API to every %ds", name, request.seconds)
    return _to_response(job)
