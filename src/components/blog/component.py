"""
Blog component - post and comment lifecycle.

Creates, updates and deletes posts and comments. The published flag is not
touched here; it belongs to the publish component. A post created
unpublished gets its auto-publish task scheduled exactly once, at creation.

Guards:
- title at least `content.title.min` characters, body non-empty, owner set
- comments only on published posts, with a non-empty body and an author
"""

from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from src.components.auto_publish import schedule_auto_publish
from src.domain.entities import Comment, Post, User
from src.domain.errors import NotFound, ValidationError
from src.domain.validation import validate_comment, validate_post
from src.rules.models import ContentRules, SchedulingRules

from .ports import ClockPort, CommentRepoPort, PostRepoPort, TaskSchedulerPort

logger = logging.getLogger(__name__)


class BlogComponent:
    def __init__(
        self,
        post_repo: PostRepoPort,
        comment_repo: CommentRepoPort,
        scheduler: TaskSchedulerPort,
        clock: ClockPort,
        content_rules: ContentRules | None = None,
        scheduling_rules: SchedulingRules | None = None,
    ) -> None:
        self._post_repo = post_repo
        self._comment_repo = comment_repo
        self._scheduler = scheduler
        self._clock = clock
        self._content_rules = content_rules or ContentRules()
        self._scheduling_rules = scheduling_rules or SchedulingRules()

    # --- Posts ---

    def create_post(
        self,
        title: str,
        body: str,
        owner: User | None,
        published: bool = False,
        schedule: bool = True,
    ) -> Post:
        """Validate and save a post. Drafts get an auto-publish task unless schedule is False."""
        now = self._clock.now()
        post = Post(
            title=title,
            body=body,
            published=published,
            owner_user_id=owner.id if owner else None,
            created_at=now,
            updated_at=now,
        )

        errors = validate_post(post, self._content_rules)
        if errors:
            raise ValidationError(errors)

        self._post_repo.save(post)

        if schedule and not post.published:
            delay = timedelta(seconds=self._scheduling_rules.auto_publish_delay_seconds)
            schedule_auto_publish(self._scheduler, post, delay)

        return post

    def get_post(self, post_id: UUID) -> Post:
        post = self._post_repo.get_by_id(post_id)
        if post is None:
            raise NotFound("post", post_id)
        return post

    def list_posts(self, published: bool | None = None) -> list[Post]:
        return self._post_repo.list_posts(published=published)

    def update_post(
        self,
        post: Post,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> Post:
        updates: dict[str, object] = {"updated_at": self._clock.now()}
        if title is not None:
            updates["title"] = title
        if body is not None:
            updates["body"] = body

        updated = post.model_copy(update=updates)
        errors = validate_post(updated, self._content_rules)
        if errors:
            raise ValidationError(errors)

        self._post_repo.save(updated)
        return updated

    def delete_post(self, post: Post) -> None:
        # Pending auto-publish tasks stay queued and find nothing when they run.
        self._post_repo.delete(post.id)
        logger.info("Post %s deleted", post.id)

    # --- Comments ---

    def create_comment(self, post: Post | None, body: str, author: User | None) -> Comment:
        errors = validate_comment(body, post, author, self._content_rules)
        if errors or post is None or author is None:
            raise ValidationError(errors)

        now = self._clock.now()
        comment = Comment(
            body=body,
            post_id=post.id,
            author_user_id=author.id,
            created_at=now,
            updated_at=now,
        )
        self._comment_repo.save(comment)
        return comment

    def get_comment(self, post: Post, comment_id: UUID) -> Comment:
        comment = self._comment_repo.get_by_id(comment_id)
        if comment is None or comment.post_id != post.id:
            raise NotFound("comment", comment_id)
        return comment

    def list_comments(self, post: Post) -> list[Comment]:
        return self._comment_repo.list_by_post(post.id)

    def delete_comment(self, comment: Comment) -> None:
        self._comment_repo.delete(comment.id)
