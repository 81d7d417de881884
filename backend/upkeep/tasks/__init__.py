"""Recurring maintenance tasks and their scheduler."""
from upkeep.tasks.exceptions import (
    SchedulerError,
    SchedulerStartupError,
    DuplicateTaskError,
    TaskNotFoundError,
    TaskUpdateError,
)
from upkeep.tasks.registry import (
    DEFAULT_INTERVALS,
    TaskDefinition,
    build_task_bodies,
)
from upkeep.tasks.scheduler import JobInfo, TaskScheduler

__all__ = [
    "SchedulerError",
    "SchedulerStartupError",
    "DuplicateTaskError",
    "TaskNotFoundError",
    "TaskUpdateError",
    "DEFAULT_INTERVALS",
    "TaskDefinition",
    "build_task_bodies",
    "JobInfo",
    "TaskScheduler",
]
