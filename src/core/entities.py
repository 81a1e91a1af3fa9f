"""
Task queue entities for the blog.

Blog entities (User, Post, Comment, Actor) live in src.domain.entities and
are re-exported here so queue code can import everything from one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from src.domain.entities import Actor, Authenticated, Comment, Guest, Post, User

__all__ = [
    "Actor",
    "Authenticated",
    "Comment",
    "Guest",
    "Post",
    "User",
    "DeferredTask",
    "DeferredTaskStatus",
]


# --- DeferredTask (Scheduler) ---

DeferredTaskStatus = Literal["queued", "running", "succeeded", "retry_wait", "failed"]


@dataclass(frozen=False)
class DeferredTask:
    """
    A unit of work to run once, no earlier than ``not_before``.

    State machine:
    - queued -> running -> succeeded
    - running -> retry_wait -> running
    - running -> failed (after max attempts, or for unknown task names)
    """

    task_name: str
    not_before: datetime
    payload: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    status: DeferredTaskStatus = "queued"
    attempts: int = 0
    last_attempt_at: datetime | None = None
    next_retry_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    claimed_by: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
