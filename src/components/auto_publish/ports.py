"""Auto-publish component port definitions."""

from datetime import timedelta
from typing import Any, Protocol
from uuid import UUID

from src.core.entities import DeferredTask
from src.domain.entities import Post


class PostRepoPort(Protocol):
    def get_by_id(self, post_id: UUID) -> Post | None:
        ...


class PublisherPort(Protocol):
    """The publishing service, as seen by the task."""

    def publish(self, post: Post | None) -> bool:
        ...


class TaskSchedulerPort(Protocol):
    def enqueue(
        self,
        task_name: str,
        payload: dict[str, Any],
        delay: timedelta,
    ) -> DeferredTask:
        ...
