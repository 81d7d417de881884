"""Task scheduler Pydantic schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TaskRescheduleRequest(BaseModel):
    """Schema for rescheduling a task."""
    # Number of seconds in between each run of the task
    seconds: int = Field(..., gt=0)


class TaskResponse(BaseModel):
    """A scheduled task and when it will next run."""
    name: str
    next_run: Optional[datetime] = None
    interval_seconds: int


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]
    total: int


class TaskStatsResponse(BaseModel):
    runs: int
    failures: int
    last_run: Optional[datetime] = None
    last_error: Optional[str] = None
