"""FastAPI dependencies for the task scheduler and admin authentication."""
import secrets
from typing import Optional

from fastapi import Depends, Header, Request

from upkeep.api.exceptions import service_unavailable, unauthorized
from upkeep.config import Settings, get_settings
from upkeep.tasks.scheduler import TaskScheduler


def get_scheduler(request: Request) -> TaskScheduler:
    """
    Dependency to get the running task scheduler.

    Raises:
        HTTPException: 503 if the scheduler failed to start
    """
    scheduler: Optional[TaskScheduler] = getattr(request.app.state, "scheduler", None)
    if scheduler is None or not scheduler.running:
        raise service_unavailable("Task scheduler is not running")
    return scheduler


async def require_admin_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the admin bearer token.

    Skipped when ADMIN_API_TOKEN is not configured.

    Raises:
        HTTPException: 401 if the token is missing or wrong
    """
    if not settings.ADMIN_API_TOKEN:
        return

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise unauthorized()
    if not secrets.compare_digest(token, settings.ADMIN_API_TOKEN):
        raise unauthorized("Invalid API token")
