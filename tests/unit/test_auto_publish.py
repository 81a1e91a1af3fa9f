import logging
from datetime import timedelta
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest

from src.components.auto_publish import (
    AUTO_PUBLISH_TASK,
    DEFAULT_DELAY,
    AutoPublishTask,
    schedule_auto_publish,
)
from src.components.publish import PublishComponent
from src.domain.entities import Post
from src.domain.errors import PublishError


class MockPostRepo:
    def __init__(self) -> None:
        self.posts: dict[UUID, Post] = {}

    def save(self, post: Post) -> Post:
        self.posts[post.id] = post.model_copy()
        return post

    def get_by_id(self, post_id: UUID) -> Post | None:
        stored = self.posts.get(post_id)
        return stored.model_copy() if stored else None


@pytest.fixture
def repo():
    return MockPostRepo()


@pytest.fixture
def publisher(repo, clock):
    return PublishComponent(repo, clock)


@pytest.fixture
def task(repo, publisher):
    return AutoPublishTask(repo, publisher)


def _draft(repo, **kwargs):
    defaults = {"title": "Pending post", "body": "Body", "owner_user_id": uuid4()}
    defaults.update(kwargs)
    post = Post(**defaults)
    repo.save(post)
    return post


def test_default_delay_is_one_hour():
    assert DEFAULT_DELAY == timedelta(hours=1)


def test_schedule_enqueues_post_id():
    scheduler = Mock()
    post = Post(title="Pending post", body="Body", owner_user_id=uuid4())

    schedule_auto_publish(scheduler, post)

    scheduler.enqueue.assert_called_once_with(
        AUTO_PUBLISH_TASK, {"post_id": str(post.id)}, timedelta(hours=1)
    )


def test_schedule_skips_published_post():
    scheduler = Mock()
    post = Post(title="Live post", body="Body", published=True, owner_user_id=uuid4())

    assert schedule_auto_publish(scheduler, post) is None
    scheduler.enqueue.assert_not_called()


def test_task_publishes_draft(task, repo):
    post = _draft(repo)

    task({"post_id": str(post.id)})

    assert repo.get_by_id(post.id).published is True


def test_task_missing_post_is_noop(task, caplog):
    missing = uuid4()
    with caplog.at_level(logging.WARNING):
        task({"post_id": str(missing)})
    assert f"post {missing} not found" in caplog.text


def test_task_already_published_is_noop(repo, clock, caplog):
    post = _draft(repo, published=True)
    publisher = Mock(spec=PublishComponent)
    task = AutoPublishTask(repo, publisher)

    with caplog.at_level(logging.INFO):
        task.run(post.id)

    publisher.publish.assert_not_called()
    assert "is already published" in caplog.text


def test_task_runs_twice_harmlessly(task, repo):
    post = _draft(repo)
    task.run(post.id)
    task.run(post.id)
    assert repo.get_by_id(post.id).published is True


def test_task_reraises_publish_error(task, repo, caplog):
    post = _draft(repo, title="Bad")

    with caplog.at_level(logging.ERROR), pytest.raises(PublishError):
        task.run(post.id)

    assert "failed to publish post" in caplog.text
    assert repo.get_by_id(post.id).published is False


def test_task_does_not_unpublish(task, repo, publisher):
    post = _draft(repo)
    publisher.publish(post)

    task.run(post.id)

    assert repo.get_by_id(post.id).published is True
