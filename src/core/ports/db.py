"""
Database port for the deferred task queue.

Blog repositories are declared by the components that use them.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.core.entities import DeferredTask


class DeferredTaskRepoPort(Protocol):
    """
    Repository for deferred tasks.

    Invariants:
    - a claimed task is never claimed again while 'running'
    """

    def get_by_id(self, task_id: UUID) -> DeferredTask | None:
        """Get task by ID."""
        ...

    def save(self, task: DeferredTask) -> DeferredTask:
        """Save or update task (upsert)."""
        ...

    def claim_next_runnable(self, worker_id: str, now_utc: datetime) -> DeferredTask | None:
        """
        Atomically claim the next runnable task.
        Runnable = queued with not_before <= now, or retry_wait with
        next_retry_at <= now. Sets status to 'running' and claimed_by.
        """
        ...

    def list_pending(self) -> list[DeferredTask]:
        """List all pending tasks (queued, running, retry_wait)."""
        ...

    def list_by_name(self, task_name: str) -> list[DeferredTask]:
        """List all tasks with the given name, newest first."""
        ...
