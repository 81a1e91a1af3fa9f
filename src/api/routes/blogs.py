import logging
import time
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from src.api.deps import get_actor, get_context, get_current_user
from src.api.schemas import PostCreateRequest, PostUpdateRequest
from src.app_shell.context import ServiceContext
from src.domain.entities import Actor, Authenticated, Post, User

logger = logging.getLogger(__name__)

router = APIRouter()


def _readable(ctx: ServiceContext, actor: Actor, posts: list[Post]) -> list[Post]:
    return [p for p in posts if ctx.policy.check_permission(actor, "read", p)]


@router.get("")
def list_blogs(
    actor: Actor = Depends(get_actor),
    ctx: ServiceContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """List posts the actor may read, default view."""
    started = time.perf_counter()
    posts = _readable(ctx, actor, ctx.blog.list_posts())
    queried = time.perf_counter()
    rendered = ctx.renderer.render_posts(posts)
    finished = time.perf_counter()

    logger.info(
        "Blog index: %d posts, query %.4fs, serialization %.4fs, total %.4fs",
        len(posts),
        queried - started,
        finished - queried,
        finished - started,
    )
    return rendered  # type: ignore[return-value]


@router.get("/published")
def list_published(
    actor: Actor = Depends(get_actor),
    ctx: ServiceContext = Depends(get_context),
) -> list[dict[str, Any]]:
    posts = _readable(ctx, actor, ctx.blog.list_posts(published=True))
    return ctx.renderer.render_posts(posts)  # type: ignore[return-value]


@router.get("/unpublished")
def list_unpublished(
    actor: Actor = Depends(get_actor),
    ctx: ServiceContext = Depends(get_context),
) -> list[dict[str, Any]]:
    posts = _readable(ctx, actor, ctx.blog.list_posts(published=False))
    return ctx.renderer.render_posts(posts)  # type: ignore[return-value]


@router.get("/{post_id}")
def show_blog(
    post_id: UUID,
    actor: Actor = Depends(get_actor),
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    """A single post with its comments."""
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(actor, "read", post)
    return ctx.renderer.render_post(post, view="extended")  # type: ignore[return-value]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_blog(
    req: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    """Create a post. Unpublished posts are auto-published later."""
    ctx.policy.enforce(Authenticated(current_user), "create", "post")
    post = ctx.blog.create_post(req.title, req.body, owner=current_user)
    return ctx.renderer.render_post(post)  # type: ignore[return-value]


@router.api_route("/{post_id}", methods=["PUT", "PATCH"])
def update_blog(
    post_id: UUID,
    req: PostUpdateRequest,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(Authenticated(current_user), "update", post)
    post = ctx.blog.update_post(post, title=req.title, body=req.body)
    return ctx.renderer.render_post(post)  # type: ignore[return-value]


@router.patch("/{post_id}/publish")
def publish_blog(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    """Toggle the published state."""
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(Authenticated(current_user), "publish", post)
    ctx.publisher.toggle(post)
    return ctx.renderer.render_post(post)  # type: ignore[return-value]


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def destroy_blog(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> Response:
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(Authenticated(current_user), "destroy", post)
    ctx.blog.delete_post(post)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
