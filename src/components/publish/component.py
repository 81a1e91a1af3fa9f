"""
Publish component - moves a post between unpublished and published.

publish and unpublish are strict inverses: each refuses to run when the
post is already in the target state. There is no "ensure published" mode.
"""

from __future__ import annotations

import logging

from src.domain.entities import Post
from src.domain.errors import PublishError
from src.domain.validation import validate_post
from src.rules.models import ContentRules

from .ports import ClockPort, PostRepoPort

logger = logging.getLogger(__name__)


class PublishComponent:
    """Publishing service for blog posts."""

    def __init__(
        self,
        post_repo: PostRepoPort,
        clock: ClockPort,
        content_rules: ContentRules | None = None,
    ) -> None:
        self._post_repo = post_repo
        self._clock = clock
        self._content_rules = content_rules or ContentRules()

    def publish(self, post: Post | None) -> bool:
        """
        Publish a post.

        Raises:
            PublishError: if the post is missing, already published, or
                fails validation on save.
        """
        if post is None:
            raise PublishError("Post not found")
        if post.published:
            raise PublishError("Post is already published")

        self._set_published(post, True)
        logger.info("Post %s '%s' was published successfully", post.id, post.title)
        return True

    def unpublish(self, post: Post | None) -> bool:
        """
        Unpublish a post.

        Raises:
            PublishError: if the post is missing, already unpublished, or
                fails validation on save.
        """
        if post is None:
            raise PublishError("Post not found")
        if not post.published:
            raise PublishError("Post is already unpublished")

        self._set_published(post, False)
        logger.info("Post %s '%s' was unpublished successfully", post.id, post.title)
        return True

    def toggle(self, post: Post | None) -> bool:
        """Publish an unpublished post, unpublish a published one."""
        if post is not None and post.published:
            return self.unpublish(post)
        return self.publish(post)

    toggle_publish = toggle

    def _set_published(self, post: Post, published: bool) -> None:
        verb = "publish" if published else "unpublish"
        now = self._clock.now()

        candidate = post.model_copy(update={"published": published, "updated_at": now})
        errors = validate_post(candidate, self._content_rules)
        if errors:
            joined = ", ".join(e.message for e in errors)
            raise PublishError(f"Failed to {verb} post: {joined}")

        self._post_repo.save(candidate)
        post.published = published
        post.updated_at = now
