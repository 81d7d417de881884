"""Recurring maintenance task scheduler using APScheduler."""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional, Union
from uuid import uuid4

from apscheduler.events import EVENT_JOB_MAX_INSTANCES, EVENT_JOB_MISSED
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.job import Job
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from upkeep.tasks.exceptions import (
    DuplicateTaskError,
    SchedulerStartupError,
    TaskNotFoundError,
    TaskUpdateError,
)
from upkeep.tasks.registry import TaskDefinition, WorkFunction


logger = logging.getLogger(__name__)

Interval = Union[timedelta, int, float]


@dataclass(frozen=True)
class JobInfo:
    """Snapshot of an active job, safe to hand to callers."""

    name: str
    next_run_time: Optional[datetime]
    interval_seconds: int


@dataclass
class TaskStats:
    """Per-task run counters."""

    runs: int = 0
    failures: int = 0
    last_run: Optional[datetime] = None
    last_error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "runs": self.runs,
            "failures": self.failures,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_error": self.last_error,
        }


def _to_seconds(interval: Interval) -> int:
    if isinstance(interval, timedelta):
        return int(interval.total_seconds())
    return int(interval)


class TaskScheduler:
    """Owns the named maintenance tasks and the engine that runs them.

    Jobs are identified by task name. The engine assigns each job an id,
    which changes on every reschedule and never leaves this class.
    """

    def __init__(
        self,
        timezone: str = "UTC",
        max_workers: int = 10,
        misfire_grace_time: int = 300,
    ):
        self.timezone = timezone
        self.max_workers = max_workers
        self.misfire_grace_time = misfire_grace_time

        self._engine: Optional[BackgroundScheduler] = None
        self._tasks: dict[str, TaskDefinition] = {}
        self._stats: dict[str, TaskStats] = {}
        # One per task name, shared by the retired and replacement jobs
        self._run_locks: dict[str, threading.Lock] = {}
        self._lock = threading.RLock()
        self._stats_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "TaskScheduler":
        """Build a scheduler from application settings."""
        return cls(
            timezone=settings.SCHEDULER_TIMEZONE,
            max_workers=settings.SCHEDULER_MAX_WORKERS,
            misfire_grace_time=settings.SCHEDULER_MISFIRE_GRACE_SECONDS,
        )

    @property
    def running(self) -> bool:
        return self._engine is not None and self._engine.running

    @property
    def tasks(self) -> Mapping[str, TaskDefinition]:
        return dict(self._tasks)

    def _create_engine(self) -> BackgroundScheduler:
        jobstores = {
            'default': MemoryJobStore()
        }
        executors = {
            'default': ThreadPoolExecutor(self.max_workers)
        }
        job_defaults = {
            'coalesce': True,  # Combine missed runs into one
            'max_instances': 1,  # A job never overlaps itself
            'misfire_grace_time': self.misfire_grace_time,
        }
        engine = BackgroundScheduler(
            jobstores=jobstores,
            executors=executors,
            job_defaults=job_defaults,
            timezone=self.timezone,
        )
        engine.add_listener(self._on_job_skipped, EVENT_JOB_MISSED | EVENT_JOB_MAX_INSTANCES)
        return engine

    def initialize(
        self,
        task_bodies: Mapping[str, WorkFunction],
        interval_overrides: Mapping[str, int],
        default_intervals: Mapping[str, Interval],
    ) -> None:
        """
        Create the engine, register every task and start running them.

        A task whose registration fails is logged and left out; the
        remaining tasks are still registered.

        Args:
            task_bodies: Work function for each task name
            interval_overrides: Interval in seconds by task name; 0 or absent
                means use the default
            default_intervals: Default interval for each task, in the order
                tasks are registered

        Raises:
            SchedulerStartupError: If the engine cannot be built or started,
                or this scheduler was already initialized
        """
        with self._lock:
            if self._engine is not None:
                raise SchedulerStartupError("Scheduler is already initialized")

            try:
                self._engine = self._create_engine()
            except Exception as e:
                logger.error("Failed to create task scheduler engine: %s", e)
                raise SchedulerStartupError("Failed to create task scheduler") from e

            for name in interval_overrides:
                if name not in default_intervals:
                    logger.warning("Ignoring schedule override for unknown task %r", name)

            for name, default in default_intervals.items():
                override = interval_overrides.get(name)
                interval = override if override else default
                try:
                    definition = TaskDefinition(name=name, func=task_bodies[name])
                    self._add_job(definition, _to_seconds(interval))
                except Exception as e:
                    logger.error("Failed to add task %r to scheduler: %r", name, e)
                    continue
                self._tasks[name] = definition
                logger.debug(
                    "Task %r added (interval %ss, default %ss)",
                    name, _to_seconds(interval), _to_seconds(default)
                )

            try:
                self._engine.start()
            except Exception as e:
                logger.error("Failed to start task scheduler: %s", e)
                raise SchedulerStartupError("Failed to start task scheduler") from e

        logger.info("Task scheduler started with %d jobs", len(self._tasks))

    def shutdown(self, wait: bool = True) -> None:
        """Stop the engine. Running job bodies finish first when wait is set."""
        with self._lock:
            if self._engine is not None and self._engine.running:
                self._engine.shutdown(wait=wait)
                logger.info("Task scheduler stopped")

    def _require_engine(self) -> BackgroundScheduler:
        if self._engine is None:
            raise RuntimeError("Scheduler not initialized. Call initialize() first.")
        return self._engine

    def _add_job(self, definition: TaskDefinition, seconds: int) -> Job:
        """Register a job for a task. Callers hold the lock."""
        if seconds <= 0:
            raise ValueError(f"Interval must be positive, got {seconds}")
        if self.find_job(definition.name) is not None:
            raise DuplicateTaskError(definition.name)

        return self._require_engine().add_job(
            self._guard(definition),
            self._trigger(seconds),
            id=uuid4().hex,
            name=definition.name,
        )

    def _trigger(self, seconds: int) -> IntervalTrigger:
        return IntervalTrigger(seconds=seconds, timezone=self.timezone)

    def _guard(self, definition: TaskDefinition) -> Callable[[], None]:
        """Wrap a work function so a failing run is logged and counted.

        A run is skipped while another run of the same task is in flight,
        including one started by a job retired in a reschedule.
        """
        name = definition.name
        func = definition.func
        run_lock = self._run_locks.setdefault(name, threading.Lock())

        def run() -> None:
            if not run_lock.acquire(blocking=False):
                logger.warning("Task %r is still running, skipping this run", name)
                return
            started = datetime.now(timezone.utc)
            try:
                func()
            except Exception as e:
                logger.exception("Task %r failed", name)
                self._record_run(name, started, e)
            else:
                self._record_run(name, started, None)
            finally:
                run_lock.release()

        return run

    def _record_run(self, name: str, started: datetime, error: Optional[Exception]) -> None:
        with self._stats_lock:
            stats = self._stats.setdefault(name, TaskStats())
            stats.runs += 1
            stats.last_run = started
            if error is not None:
                stats.failures += 1
                stats.last_error = repr(error)

    def _on_job_skipped(self, event) -> None:
        job = self._engine.get_job(event.job_id) if self._engine else None
        name = job.name if job else event.job_id
        if event.code == EVENT_JOB_MISSED:
            logger.warning("Task %r missed its run at %s", name, event.scheduled_run_time)
        else:
            logger.warning("Task %r still running, skipped run at %s", name, event.scheduled_run_time)

    def find_job(self, name: str) -> Optional[Job]:
        """Return the active job for a task name, or None."""
        for job in self._require_engine().get_jobs():
            if job.name == name:
                return job
        return None

    def _describe(self, job: Job) -> JobInfo:
        try:
            next_run = job.next_run_time
        except AttributeError:
            # Pending jobs (engine not started) have no next run time yet
            logger.error("Failed to get next run time for task %r", job.name)
            next_run = None

        return JobInfo(
            name=job.name,
            next_run_time=next_run,
            interval_seconds=int(job.trigger.interval.total_seconds()),
        )

    def list_jobs(self) -> list[JobInfo]:
        """List every active job with its next run time."""
        with self._lock:
            return [self._describe(job) for job in self._require_engine().get_jobs()]

    def get_job(self, name: str) -> Optional[JobInfo]:
        """Describe the active job for a task name, or None."""
        with self._lock:
            job = self.find_job(name)
            return self._describe(job) if job else None

    def reschedule(self, name: str, seconds: int) -> JobInfo:
        """
        Replace a task's job with one running every `seconds`.

        The replacement reuses the task's work function and name. Its first
        run is `seconds` from now; time since the previous run is discarded.

        Raises:
            ValueError: If seconds is not a positive integer
            TaskNotFoundError: If no active job has this name
            TaskUpdateError: If the engine rejects the replacement
        """
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValueError(f"Interval must be a positive integer, got {seconds!r}")

        with self._lock:
            engine = self._require_engine()
            old = self.find_job(name)
            if old is None:
                raise TaskNotFoundError(name)

            definition = self._tasks[name]
            new = None
            try:
                new = engine.add_job(
                    self._guard(definition),
                    self._trigger(seconds),
                    id=uuid4().hex,
                    name=name,
                )
                engine.remove_job(old.id)
            except Exception as e:
                logger.exception("Failed to reschedule task %r", name)
                if new is not None:
                    try:
                        engine.remove_job(new.id)
                    except Exception:
                        logger.exception("Failed to withdraw replacement job for task %r", name)
                raise TaskUpdateError(name) from e

            logger.info("Rescheduled task %r to run every %ds", name, seconds)
            return self._describe(new)

    def get_stats(self) -> dict:
        """Run counters for every task that has run at least once."""
        with self._stats_lock:
            return {name: stats.to_dict() for name, stats in self._stats.items()}
