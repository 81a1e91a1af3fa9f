from uuid import uuid4

import pytest

from src.components.auto_publish import AUTO_PUBLISH_TASK
from src.domain.errors import NotFound, ValidationError


def test_create_post_persists_and_schedules(ctx, alice, clock):
    post = ctx.blog.create_post("First post", "Hello", owner=alice)

    assert ctx.post_repo.get_by_id(post.id).published is False

    tasks = ctx.task_repo.list_by_name(AUTO_PUBLISH_TASK)
    assert len(tasks) == 1
    assert tasks[0].payload == {"post_id": str(post.id)}
    assert (tasks[0].not_before - clock.now()).total_seconds() == 3600


def test_create_published_post_schedules_nothing(ctx, alice):
    ctx.blog.create_post("Live already", "Hello", owner=alice, published=True)
    assert ctx.task_repo.list_by_name(AUTO_PUBLISH_TASK) == []


def test_invalid_post_is_not_saved_or_scheduled(ctx, alice):
    with pytest.raises(ValidationError) as exc:
        ctx.blog.create_post("Hey", "Hello", owner=alice)

    assert [e.code for e in exc.value.errors] == ["title_too_short"]
    assert ctx.post_repo.list_posts() == []
    assert ctx.task_repo.list_pending() == []


def test_post_without_owner_is_rejected(ctx):
    with pytest.raises(ValidationError) as exc:
        ctx.blog.create_post("Ownerless", "Hello", owner=None)
    assert [e.code for e in exc.value.errors] == ["owner_required"]


def test_auto_publish_after_one_hour(ctx, alice, clock):
    post = ctx.blog.create_post("Scheduled post", "Hello", owner=alice)

    clock.advance(minutes=59)
    assert ctx.runner.run_due_tasks().total_processed == 0
    assert ctx.blog.get_post(post.id).published is False

    clock.advance(minutes=1)
    result = ctx.runner.run_due_tasks()

    assert result.succeeded == 1
    assert ctx.blog.get_post(post.id).published is True


def test_auto_publish_skips_manually_published(ctx, alice, clock):
    post = ctx.blog.create_post("Manual post", "Hello", owner=alice)
    ctx.publisher.publish(post)
    published_at = ctx.blog.get_post(post.id).updated_at

    clock.advance(hours=1)
    result = ctx.runner.run_due_tasks()

    assert result.succeeded == 1
    stored = ctx.blog.get_post(post.id)
    assert stored.published is True
    assert stored.updated_at == published_at


def test_auto_publish_deleted_post(ctx, alice, clock):
    post = ctx.blog.create_post("Doomed post", "Hello", owner=alice)
    ctx.blog.delete_post(post)

    clock.advance(hours=1)
    result = ctx.runner.run_due_tasks()

    assert result.succeeded == 1
    assert ctx.task_repo.list_pending() == []


def test_manual_unpublish_before_task_gets_republished(ctx, alice, clock):
    post = ctx.blog.create_post("Flip flop", "Hello", owner=alice)
    ctx.publisher.publish(post)
    ctx.publisher.unpublish(post)

    clock.advance(hours=1)
    ctx.runner.run_due_tasks()

    assert ctx.blog.get_post(post.id).published is True


def test_update_post(ctx, alice, clock):
    post = ctx.blog.create_post("Original", "Hello", owner=alice)
    clock.advance(minutes=1)

    updated = ctx.blog.update_post(post, title="Renamed post")

    assert updated.title == "Renamed post"
    assert updated.body == "Hello"
    assert updated.updated_at == clock.now()
    assert ctx.blog.get_post(post.id).title == "Renamed post"


def test_update_post_validates(ctx, alice):
    post = ctx.blog.create_post("Original", "Hello", owner=alice)
    with pytest.raises(ValidationError):
        ctx.blog.update_post(post, body="")
    assert ctx.blog.get_post(post.id).body == "Hello"


def test_get_post_not_found(ctx):
    with pytest.raises(NotFound):
        ctx.blog.get_post(uuid4())


def test_comment_on_published_post(ctx, alice, bob):
    post = ctx.blog.create_post("Open post", "Hello", owner=alice, published=True)

    comment = ctx.blog.create_comment(post, "Nice one", author=bob)

    assert comment.post_id == post.id
    assert comment.author_user_id == bob.id
    assert [c.id for c in ctx.blog.list_comments(post)] == [comment.id]


def test_comment_on_draft_rejected(ctx, alice, bob):
    post = ctx.blog.create_post("Closed post", "Hello", owner=alice)

    with pytest.raises(ValidationError) as exc:
        ctx.blog.create_comment(post, "Too early", author=bob)

    assert exc.value.errors[0].message == "Blog must be published to allow comments"
    assert ctx.comment_repo.count_by_post(post.id) == 0


def test_blank_comment_rejected(ctx, alice, bob):
    post = ctx.blog.create_post("Open post", "Hello", owner=alice, published=True)
    with pytest.raises(ValidationError):
        ctx.blog.create_comment(post, "  ", author=bob)


def test_get_comment_checks_post(ctx, alice, bob):
    post = ctx.blog.create_post("Open post", "Hello", owner=alice, published=True)
    other = ctx.blog.create_post("Other post", "Hello", owner=alice, published=True)
    comment = ctx.blog.create_comment(post, "Mine", author=bob)

    assert ctx.blog.get_comment(post, comment.id).id == comment.id
    with pytest.raises(NotFound):
        ctx.blog.get_comment(other, comment.id)


def test_delete_post_deletes_comments(ctx, alice, bob):
    post = ctx.blog.create_post("Open post", "Hello", owner=alice, published=True)
    comment = ctx.blog.create_comment(post, "Bye", author=bob)

    ctx.blog.delete_post(post)

    assert ctx.comment_repo.get_by_id(comment.id) is None


def test_render_extended_from_db(ctx, alice, bob, clock):
    post = ctx.blog.create_post("Open post", "Hello", owner=alice, published=True)
    ctx.blog.create_comment(post, "first", author=bob)
    clock.advance(seconds=1)
    ctx.blog.create_comment(post, "second", author=bob)

    out = ctx.renderer.render_post(post, view="extended")

    assert out["author"] == "alice@example.com"
    assert out["comments_count"] == 2
    assert [c["body"] for c in out["comments"]] == ["second", "first"]
    assert out["comments"][0]["author"] == "bob@example.com"
