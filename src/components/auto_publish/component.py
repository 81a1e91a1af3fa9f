"""
Auto-publish component - deferred publishing of new posts.

A post created unpublished gets one deferred task, due a fixed delay
after creation. When the task runs:

1. Missing post -> warning, finish successfully (no retry).
2. Already published -> info, finish successfully (no mutation).
3. Otherwise publish. A PublishError is logged and re-raised so the
   task runner's retry policy applies.

Running the task twice, or after the post was deleted, is harmless.
The check in step 2 and the write in step 3 are not atomic; a concurrent
manual publish in between makes step 3 raise PublishError.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from src.core.entities import DeferredTask
from src.domain.entities import Post
from src.domain.errors import PublishError

from .ports import PostRepoPort, PublisherPort, TaskSchedulerPort

logger = logging.getLogger(__name__)

AUTO_PUBLISH_TASK = "auto_publish_post"
DEFAULT_DELAY = timedelta(hours=1)


def schedule_auto_publish(
    scheduler: TaskSchedulerPort,
    post: Post,
    delay: timedelta = DEFAULT_DELAY,
) -> DeferredTask | None:
    """
    Enqueue the auto-publish task for a freshly created post.

    Does nothing for a post that is already published.
    """
    if post.published:
        return None

    task = scheduler.enqueue(AUTO_PUBLISH_TASK, {"post_id": str(post.id)}, delay)
    logger.info(
        "Scheduled auto-publish for post %s in %d seconds",
        post.id,
        int(delay.total_seconds()),
    )
    return task


class AutoPublishTask:
    """Task body registered under AUTO_PUBLISH_TASK."""

    def __init__(self, post_repo: PostRepoPort, publisher: PublisherPort) -> None:
        self._post_repo = post_repo
        self._publisher = publisher

    def __call__(self, payload: dict[str, Any]) -> None:
        self.run(UUID(str(payload["post_id"])))

    def run(self, post_id: UUID) -> None:
        post = self._post_repo.get_by_id(post_id)

        if post is None:
            logger.warning("AutoPublishTask: post %s not found", post_id)
            return

        if post.published:
            logger.info("AutoPublishTask: post %s is already published", post_id)
            return

        try:
            self._publisher.publish(post)
        except PublishError as e:
            logger.error("AutoPublishTask: failed to publish post %s: %s", post_id, e)
            raise

        logger.info("AutoPublishTask: published post %s '%s'", post_id, post.title)
