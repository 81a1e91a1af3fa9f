from datetime import datetime, timedelta
from uuid import UUID

import pytest

from src.components.render import RenderComponent
from src.domain.entities import Comment, Post, User

T0 = datetime(2026, 1, 1, 12, 0, 0)


class MockCommentRepo:
    def __init__(self, comments: list[Comment]) -> None:
        self.comments = comments

    def list_by_post(self, post_id: UUID) -> list[Comment]:
        # Deliberately oldest first; the renderer must order them
        return sorted(
            (c for c in self.comments if c.post_id == post_id), key=lambda c: c.created_at
        )

    def count_by_post(self, post_id: UUID) -> int:
        return sum(1 for c in self.comments if c.post_id == post_id)


class MockUserRepo:
    def __init__(self, users: list[User]) -> None:
        self.users = {u.id: u for u in users}
        self.lookups = 0

    def get_by_id(self, user_id: UUID) -> User | None:
        self.lookups += 1
        return self.users.get(user_id)


@pytest.fixture
def author():
    return User(email="author@example.com")


@pytest.fixture
def post(author):
    return Post(
        title="Rendered post",
        body="Body text",
        published=True,
        owner_user_id=author.id,
        created_at=T0,
        updated_at=T0,
    )


@pytest.fixture
def comments(post, author):
    return [
        Comment(
            body=f"Comment {i}",
            post_id=post.id,
            author_user_id=author.id,
            created_at=T0 + timedelta(minutes=i),
            updated_at=T0 + timedelta(minutes=i),
        )
        for i in range(3)
    ]


@pytest.fixture
def users(author):
    return MockUserRepo([author])


@pytest.fixture
def renderer(comments, users):
    return RenderComponent(MockCommentRepo(comments), users)


def test_default_view(renderer, post):
    out = renderer.render_post(post)

    assert out == {
        "id": str(post.id),
        "title": "Rendered post",
        "body": "Body text",
        "published": True,
        "created_at": "2026-01-01T12:00:00",
        "updated_at": "2026-01-01T12:00:00",
        "author": "author@example.com",
        "comments_count": 3,
    }


def test_extended_view_comments_newest_first(renderer, post):
    out = renderer.render_post(post, view="extended")

    assert out["comments_count"] == 3
    assert [c["body"] for c in out["comments"]] == ["Comment 2", "Comment 1", "Comment 0"]
    first = out["comments"][0]
    assert first["blog_id"] == str(post.id)
    assert first["author"] == "author@example.com"
    assert first["created_at"] == "2026-01-01T12:02:00"


def test_extended_is_default_plus_comments(renderer, post):
    default = renderer.render_post(post)
    extended = renderer.render_post(post, view="extended")
    comments = extended.pop("comments")
    assert extended == default
    assert len(comments) == 3


def test_post_without_comments(post, users):
    renderer = RenderComponent(MockCommentRepo([]), users)
    out = renderer.render_post(post, view="extended")
    assert out["comments_count"] == 0
    assert out["comments"] == []


def test_unknown_author_renders_none(post):
    renderer = RenderComponent(MockCommentRepo([]), MockUserRepo([]))
    assert renderer.render_post(post)["author"] is None


def test_unknown_view(renderer, post):
    with pytest.raises(ValueError, match="Unknown post view"):
        renderer.render_post(post, view="compact")  # type: ignore[arg-type]


def test_render_does_not_mutate(renderer, post):
    before = post.model_dump()
    renderer.render_post(post, view="extended")
    assert post.model_dump() == before


def test_collection_matches_single_renders(renderer, post):
    other = post.model_copy(update={"title": "Another post"})
    many = renderer.render_posts([post, other])
    assert many == [renderer.render_post(post), renderer.render_post(other)]


def test_collection_caches_authors(renderer, post, comments, users):
    users.lookups = 0
    renderer.render_comments(comments)
    assert users.lookups == 1
