from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from src.api.deps import get_context, get_current_user
from src.api.schemas import CommentCreateRequest
from src.app_shell.context import ServiceContext
from src.domain.entities import Authenticated, User

router = APIRouter()


@router.get("")
def list_comments(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """Comments of a post, newest first."""
    actor = Authenticated(current_user)
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(actor, "read", post)
    ctx.policy.enforce(actor, "read", "comment")
    return ctx.renderer.render_comments(ctx.blog.list_comments(post))  # type: ignore[return-value]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: UUID,
    req: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    actor = Authenticated(current_user)
    post = ctx.blog.get_post(post_id)
    ctx.policy.enforce(actor, "create", "comment")
    comment = ctx.blog.create_comment(post, req.body, author=current_user)
    return ctx.renderer.render_comment(comment)  # type: ignore[return-value]


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def destroy_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> Response:
    post = ctx.blog.get_post(post_id)
    comment = ctx.blog.get_comment(post, comment_id)
    ctx.policy.enforce(Authenticated(current_user), "destroy", comment)
    ctx.blog.delete_comment(comment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
