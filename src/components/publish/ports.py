"""Publish component port definitions - protocols for dependencies."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Post


class PostRepoPort(Protocol):
    """Protocol for post repository operations."""

    def get_by_id(self, post_id: UUID) -> Post | None:
        """Retrieve a post by ID."""
        ...

    def save(self, post: Post) -> Post:
        """Save a post."""
        ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...
