from uuid import uuid4

import pytest


@pytest.fixture
def live(ctx, alice):
    return ctx.blog.create_post("Alice live", "Live body", owner=alice, published=True)


@pytest.fixture
def draft(ctx, alice):
    return ctx.blog.create_post("Alice draft", "Draft body", owner=alice)


def test_create_comment(client, ctx, auth_headers, bob, live):
    resp = client.post(
        f"/api/blogs/{live.id}/comments", json={"body": "First!"}, headers=auth_headers(bob)
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["body"] == "First!"
    assert body["author"] == "bob@example.com"
    assert body["blog_id"] == str(live.id)
    assert ctx.comment_repo.count_by_post(live.id) == 1


def test_guest_cannot_comment(client, live):
    resp = client.post(f"/api/blogs/{live.id}/comments", json={"body": "Hi"})
    assert resp.status_code == 401


def test_comment_on_draft_rejected(client, auth_headers, alice, draft):
    # The owner can read the draft, but comments need a published post
    resp = client.post(
        f"/api/blogs/{draft.id}/comments", json={"body": "Early"}, headers=auth_headers(alice)
    )

    assert resp.status_code == 422
    assert resp.json()["errors"][0]["message"] == "Blog must be published to allow comments"


def test_comment_on_someone_elses_draft_rejected(client, ctx, auth_headers, bob, draft):
    resp = client.post(
        f"/api/blogs/{draft.id}/comments", json={"body": "Early"}, headers=auth_headers(bob)
    )

    assert resp.status_code == 422
    assert resp.json()["errors"][0]["code"] == "post_unpublished"
    assert ctx.blog.list_comments(draft) == []


def test_blank_comment(client, auth_headers, bob, live):
    resp = client.post(
        f"/api/blogs/{live.id}/comments", json={"body": ""}, headers=auth_headers(bob)
    )
    assert resp.status_code == 422
    assert resp.json()["errors"][0]["code"] == "body_required"


def test_comment_on_missing_post(client, auth_headers, bob):
    resp = client.post(
        f"/api/blogs/{uuid4()}/comments", json={"body": "Hi"}, headers=auth_headers(bob)
    )
    assert resp.status_code == 404


def test_list_comments_newest_first(client, ctx, clock, auth_headers, bob, live):
    ctx.blog.create_comment(live, "older", author=bob)
    clock.advance(seconds=5)
    ctx.blog.create_comment(live, "newer", author=bob)

    resp = client.get(f"/api/blogs/{live.id}/comments", headers=auth_headers(bob))

    assert resp.status_code == 200
    assert [c["body"] for c in resp.json()] == ["newer", "older"]


def test_guest_cannot_list_comments(client, live):
    assert client.get(f"/api/blogs/{live.id}/comments").status_code == 401


def test_author_deletes_comment(client, ctx, auth_headers, bob, live):
    comment = ctx.blog.create_comment(live, "Oops", author=bob)

    resp = client.delete(
        f"/api/blogs/{live.id}/comments/{comment.id}", headers=auth_headers(bob)
    )

    assert resp.status_code == 204
    assert ctx.comment_repo.get_by_id(comment.id) is None


def test_post_owner_cannot_delete_others_comment(client, ctx, auth_headers, alice, bob, live):
    comment = ctx.blog.create_comment(live, "Mine", author=bob)

    resp = client.delete(
        f"/api/blogs/{live.id}/comments/{comment.id}", headers=auth_headers(alice)
    )

    assert resp.status_code == 403
    assert ctx.comment_repo.get_by_id(comment.id) is not None


def test_admin_deletes_any_comment(client, ctx, auth_headers, admin, bob, live):
    comment = ctx.blog.create_comment(live, "Spam", author=bob)
    resp = client.delete(
        f"/api/blogs/{live.id}/comments/{comment.id}", headers=auth_headers(admin)
    )
    assert resp.status_code == 204


def test_delete_comment_wrong_post(client, ctx, auth_headers, alice, bob, live):
    other = ctx.blog.create_post("Other live", "Body", owner=alice, published=True)
    comment = ctx.blog.create_comment(live, "Here", author=bob)

    resp = client.delete(
        f"/api/blogs/{other.id}/comments/{comment.id}", headers=auth_headers(bob)
    )
    assert resp.status_code == 404
