"""
Deferred task interfaces.

Protocol-based interface for background task execution. A deferred task is
a (task name, payload, not-before time) record submitted through a
scheduler port; a runner later claims due tasks and dispatches them to
registered task bodies.

Key requirements:
- Tasks are claimed atomically from DB (no double execution)
- Task bodies are idempotent (same result on retry)
- Worker processes can be stateless (DB provides coordination)

Trigger strategies:
1. In-process polling worker (dev/test, single node)
2. External cron calling the `run_due` CLI command

Both call the same TaskRunner.run_due_tasks().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.core.entities import DeferredTask

# A task body receives the task payload; raising signals failure.
TaskBody = Callable[[dict[str, Any]], None]


class JobStatus(Enum):
    """Task execution result status."""

    SUCCESS = "success"
    FAILURE = "failure"
    NO_JOBS = "no_jobs"  # Nothing was due


@dataclass
class JobResult:
    """Result of a task execution attempt."""

    status: JobStatus
    task_id: UUID | None = None
    message: str = ""
    error: str | None = None
    retriable: bool = True
    execution_time_ms: int = 0


@dataclass
class BatchResult:
    """Result of processing a batch of tasks."""

    total_processed: int
    succeeded: int
    failed: int
    results: list[JobResult]


class TaskSchedulerPort(Protocol):
    """Accepts deferred work. Implementations persist and return the task."""

    def enqueue(
        self,
        task_name: str,
        payload: dict[str, Any],
        delay: timedelta,
    ) -> DeferredTask:
        """
        Schedule `task_name` to run once with `payload`, no earlier than
        now + delay.
        """
        ...


class TaskRunnerPort(Protocol):
    """
    Task runner interface.

    Coordinates claiming, execution, and status updates.
    """

    def run_due_tasks(
        self,
        worker_id: str | None = None,
        now_utc: datetime | None = None,
        max_tasks: int = 10,
    ) -> BatchResult:
        """
        Process all tasks due at or before now_utc.

        Notes:
            - Tasks are claimed atomically (DB transaction)
            - Never runs a task before its not_before time
        """
        ...


class WorkerPort(Protocol):
    """
    Worker interface for triggering runs.

    Abstracts the trigger mechanism (in-process thread, external cron).
    """

    def start(self) -> None:
        """Start polling. For cron triggers this is a no-op."""
        ...

    def stop(self) -> None:
        """Stop the worker gracefully."""
        ...

    def trigger_now(self) -> BatchResult:
        """Trigger immediate task processing."""
        ...

    @property
    def is_running(self) -> bool:
        """Check if the worker is active."""
        ...


# Error types


class TaskError(Exception):
    """Base exception for task-related errors."""

    pass


class UnknownTaskError(TaskError):
    """No task body registered under the given name."""

    def __init__(self, task_name: str) -> None:
        self.task_name = task_name
        super().__init__(f"No task registered as '{task_name}'")
