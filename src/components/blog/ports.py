"""
Blog component port definitions.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

from src.core.entities import DeferredTask
from src.domain.entities import Comment, Post


class PostRepoPort(Protocol):
    """Repository interface for post persistence."""

    def get_by_id(self, post_id: UUID) -> Post | None:
        ...

    def save(self, post: Post) -> Post:
        ...

    def list_posts(self, published: bool | None = None) -> list[Post]:
        ...

    def delete(self, post_id: UUID) -> None:
        """Delete the post and its comments."""
        ...


class CommentRepoPort(Protocol):
    """Repository interface for comment persistence."""

    def get_by_id(self, comment_id: UUID) -> Comment | None:
        ...

    def save(self, comment: Comment) -> Comment:
        ...

    def list_by_post(self, post_id: UUID) -> list[Comment]:
        ...

    def delete(self, comment_id: UUID) -> None:
        ...


class TaskSchedulerPort(Protocol):
    def enqueue(
        self,
        task_name: str,
        payload: dict[str, Any],
        delay: timedelta,
    ) -> DeferredTask:
        ...


class ClockPort(Protocol):
    def now(self) -> datetime:
        ...
