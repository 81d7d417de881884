"""Errors raised by the task scheduler."""


class SchedulerError(Exception):
    """Base class for task scheduler errors."""


class SchedulerStartupError(SchedulerError):
    """The execution engine could not be constructed or started.

    Not retryable. The owner decides whether to carry on without
    scheduled maintenance or abort.
    """


class DuplicateTaskError(SchedulerError):
    """A job with the same task name is already active."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Task "{name}" is already scheduled')


class TaskNotFoundError(SchedulerError):
    """No active job carries the requested task name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Task "{name}" not found')


class TaskUpdateError(SchedulerError):
    """The engine rejected a replacement job.

    The message is generic; the underlying cause is chained and logged.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__("Failed to update task")
