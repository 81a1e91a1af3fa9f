"""Render component - JSON views of posts and comments."""

from src.components.render.component import RenderComponent
from src.components.render.models import POST_VIEWS, PostView, RenderedComment, RenderedPost
from src.components.render.ports import CommentRepoPort, UserRepoPort

__all__ = [
    "RenderComponent",
    # Models
    "POST_VIEWS",
    "PostView",
    "RenderedComment",
    "RenderedPost",
    # Ports
    "CommentRepoPort",
    "UserRepoPort",
]
