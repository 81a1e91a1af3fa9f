"""
Render component - JSON-ready views of posts and comments.

Views:
- post "default": id, title, body, published, timestamps, author
  (owner email), comments_count
- post "extended": default + comments, newest first
- comment: id, body, timestamps, author (author email), blog_id

Invariants:
- Rendering never mutates entities
- Derived fields are recomputed on every render
- A collection renders each item exactly as a single render would
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from src.domain.entities import Comment, Post, User

from .models import POST_VIEWS, PostView, RenderedComment, RenderedPost
from .ports import CommentRepoPort, UserRepoPort


def _ts(dt: datetime) -> str:
    return dt.isoformat()


class RenderComponent:
    def __init__(self, comment_repo: CommentRepoPort, user_repo: UserRepoPort) -> None:
        self._comment_repo = comment_repo
        self._user_repo = user_repo

    def _email_of(self, user_id: UUID | None, cache: dict[UUID, User | None]) -> str | None:
        if user_id is None:
            return None
        if user_id not in cache:
            cache[user_id] = self._user_repo.get_by_id(user_id)
        user = cache[user_id]
        return user.email if user else None

    def render_comment(self, comment: Comment) -> RenderedComment:
        return self._render_comment(comment, {})

    def render_comments(self, comments: Iterable[Comment]) -> list[RenderedComment]:
        cache: dict[UUID, User | None] = {}
        return [self._render_comment(c, cache) for c in comments]

    def render_post(self, post: Post, view: PostView = "default") -> RenderedPost:
        return self._render_post(post, view, {})

    def render_posts(self, posts: Iterable[Post], view: PostView = "default") -> list[RenderedPost]:
        cache: dict[UUID, User | None] = {}
        return [self._render_post(p, view, cache) for p in posts]

    def _render_comment(
        self, comment: Comment, cache: dict[UUID, User | None]
    ) -> RenderedComment:
        return {
            "id": str(comment.id),
            "body": comment.body,
            "created_at": _ts(comment.created_at),
            "updated_at": _ts(comment.updated_at),
            "author": self._email_of(comment.author_user_id, cache),
            "blog_id": str(comment.post_id),
        }

    def _render_post(
        self, post: Post, view: PostView, cache: dict[UUID, User | None]
    ) -> RenderedPost:
        if view not in POST_VIEWS:
            raise ValueError(f"Unknown post view: {view}")

        rendered: RenderedPost = {
            "id": str(post.id),
            "title": post.title,
            "body": post.body,
            "published": post.published,
            "created_at": _ts(post.created_at),
            "updated_at": _ts(post.updated_at),
            "author": self._email_of(post.owner_user_id, cache),
        }

        if view == "extended":
            comments = sorted(
                self._comment_repo.list_by_post(post.id),
                key=lambda c: c.created_at,
                reverse=True,
            )
            rendered["comments_count"] = len(comments)
            rendered["comments"] = [self._render_comment(c, cache) for c in comments]
        else:
            rendered["comments_count"] = self._comment_repo.count_by_post(post.id)

        return rendered
