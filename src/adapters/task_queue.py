"""
Deferred task queue adapter.

In-process task runner backed by the deferred_tasks table.
Uses DB polling for task claims with synchronous execution.

Key behaviors:
- enqueue persists a task with not_before = now + delay
- atomic claim via conditional UPDATE
- task bodies are looked up by name in a registry
- a raising task body is retried after a delay until max_attempts
- synchronous execution for predictable testing
- configurable poll interval for background mode
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from src.core.entities import DeferredTask
from src.core.ports.jobs import (
    BatchResult,
    JobResult,
    JobStatus,
    TaskBody,
    UnknownTaskError,
)

if TYPE_CHECKING:
    from src.core.ports.db import DeferredTaskRepoPort
    from src.ports.clock import ClockPort

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Persists deferred tasks. Implements TaskSchedulerPort."""

    def __init__(self, task_repo: DeferredTaskRepoPort, clock: ClockPort) -> None:
        self._task_repo = task_repo
        self._clock = clock

    def enqueue(
        self,
        task_name: str,
        payload: dict[str, Any],
        delay: timedelta,
    ) -> DeferredTask:
        now = self._clock.now()
        task = DeferredTask(
            task_name=task_name,
            payload=dict(payload),
            not_before=now + delay,
            created_at=now,
            updated_at=now,
        )
        self._task_repo.save(task)
        logger.debug("Enqueued %s (%s) not before %s", task_name, task.id, task.not_before)
        return task


class TaskExecutor:
    """
    Executes a single task by dispatching to the registered task body.

    Never raises; failures are reported through the JobResult.
    """

    def __init__(self, registry: dict[str, TaskBody] | None = None) -> None:
        self._registry: dict[str, TaskBody] = dict(registry or {})

    def register(self, task_name: str, body: TaskBody) -> None:
        self._registry[task_name] = body

    @property
    def task_names(self) -> list[str]:
        return sorted(self._registry)

    def execute(self, task: DeferredTask) -> JobResult:
        start_time = time.monotonic()

        try:
            body = self._registry.get(task.task_name)
            if body is None:
                raise UnknownTaskError(task.task_name)
            body(task.payload)
            elapsed_ms = int((time.monotonic() - start_time) * 1000)
            return JobResult(
                status=JobStatus.SUCCESS,
                task_id=task.id,
                message=f"Ran {task.task_name}",
                execution_time_ms=elapsed_ms,
            )

        except UnknownTaskError as e:
            return JobResult(
                status=JobStatus.FAILURE,
                task_id=task.id,
                message=f"Cannot run {task.task_name}",
                error=str(e),
                retriable=False,
                execution_time_ms=int((time.monotonic() - start_time) * 1000),
            )

        except Exception as e:
            return JobResult(
                status=JobStatus.FAILURE,
                task_id=task.id,
                message=f"Exception during {task.task_name}",
                error=str(e) or type(e).__name__,
                execution_time_ms=int((time.monotonic() - start_time) * 1000),
            )


class TaskRunner:
    """
    Task runner using DB polling.

    Implements TaskRunnerPort.
    """

    def __init__(
        self,
        task_repo: DeferredTaskRepoPort,
        executor: TaskExecutor,
        clock: ClockPort,
        max_attempts: int = 3,
        retry_delay_seconds: int = 60,
    ) -> None:
        """
        Args:
            task_repo: Repository for DeferredTask operations
            executor: Task executor holding the task registry
            clock: Time source for due checks and bookkeeping
            max_attempts: Maximum execution attempts before marking failed
            retry_delay_seconds: Delay before retry on failure
        """
        self._task_repo = task_repo
        self._executor = executor
        self._clock = clock
        self._max_attempts = max_attempts
        self._retry_delay_seconds = retry_delay_seconds
        self._worker_id = f"worker-{uuid4().hex[:8]}"

    def run_due_tasks(
        self,
        worker_id: str | None = None,
        now_utc: datetime | None = None,
        max_tasks: int = 10,
    ) -> BatchResult:
        """Process tasks due at or before now_utc."""
        worker_id = worker_id or self._worker_id
        now_utc = now_utc or self._clock.now()

        results: list[JobResult] = []
        succeeded = 0
        failed = 0

        for _ in range(max_tasks):
            task = self._task_repo.claim_next_runnable(worker_id, now_utc)
            if task is None:
                break

            result = self._execute_and_update(task, now_utc)
            results.append(result)

            if result.status == JobStatus.SUCCESS:
                succeeded += 1
            elif result.status == JobStatus.FAILURE:
                failed += 1

        if not results:
            return BatchResult(
                total_processed=0,
                succeeded=0,
                failed=0,
                results=[JobResult(status=JobStatus.NO_JOBS, message="No tasks to process")],
            )

        return BatchResult(
            total_processed=len(results),
            succeeded=succeeded,
            failed=failed,
            results=results,
        )

    def mark_success(self, task: DeferredTask, now_utc: datetime) -> None:
        task.status = "succeeded"
        task.completed_at = now_utc
        task.updated_at = now_utc
        task.error_message = None
        self._task_repo.save(task)

    def mark_failure(
        self,
        task: DeferredTask,
        error: str,
        now_utc: datetime,
        retry: bool = True,
    ) -> None:
        """Mark a task as failed, optionally scheduling a retry."""
        task.error_message = error
        task.updated_at = now_utc

        if retry and task.attempts < self._max_attempts:
            task.status = "retry_wait"
            task.next_retry_at = now_utc + timedelta(seconds=self._retry_delay_seconds)
            logger.warning(
                "Task %s (%s) failed on attempt %d, retrying at %s: %s",
                task.task_name,
                task.id,
                task.attempts,
                task.next_retry_at,
                error,
            )
        else:
            task.status = "failed"
            task.completed_at = now_utc
            logger.error(
                "Task %s (%s) failed permanently after %d attempt(s): %s",
                task.task_name,
                task.id,
                task.attempts,
                error,
            )

        self._task_repo.save(task)

    def _execute_and_update(self, task: DeferredTask, now_utc: datetime) -> JobResult:
        task.attempts += 1
        task.last_attempt_at = now_utc
        self._task_repo.save(task)

        result = self._executor.execute(task)

        if result.status == JobStatus.SUCCESS:
            self.mark_success(task, now_utc)
        elif result.status == JobStatus.FAILURE:
            self.mark_failure(task, result.error or "Unknown error", now_utc, retry=result.retriable)

        return result


class TaskWorker:
    """
    Background worker polling the runner at a configurable interval.

    Implements WorkerPort.
    """

    def __init__(
        self,
        runner: TaskRunner,
        poll_interval_seconds: float = 30.0,
        max_tasks_per_run: int = 10,
    ) -> None:
        self._runner = runner
        self._poll_interval = poll_interval_seconds
        self._max_tasks = max_tasks_per_run
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the background worker."""
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        self._running = True
        logger.info("Task worker started (poll interval: %.1fs)", self._poll_interval)

    def stop(self) -> None:
        """Stop the worker gracefully."""
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Task worker stopped")

    def trigger_now(self) -> BatchResult:
        """Run one batch synchronously."""
        return self._runner.run_due_tasks(max_tasks=self._max_tasks)

    @property
    def is_running(self) -> bool:
        return self._running

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._poll_interval):
            try:
                result = self.trigger_now()
                if result.total_processed > 0:
                    logger.info(
                        "Worker processed %d tasks: %d succeeded, %d failed",
                        result.total_processed,
                        result.succeeded,
                        result.failed,
                    )
            except Exception:
                logger.exception("Error in task worker poll loop")
