"""Render component port definitions."""

from typing import Protocol
from uuid import UUID

from src.domain.entities import Comment, User


class CommentRepoPort(Protocol):
    def list_by_post(self, post_id: UUID) -> list[Comment]:
        """Comments of a post, newest first."""
        ...

    def count_by_post(self, post_id: UUID) -> int:
        ...


class UserRepoPort(Protocol):
    def get_by_id(self, user_id: UUID) -> User | None:
        ...
