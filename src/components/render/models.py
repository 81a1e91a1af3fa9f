"""Render component models - view names and output shapes."""

from typing import Literal, TypedDict

PostView = Literal["default", "extended"]

POST_VIEWS: tuple[PostView, ...] = ("default", "extended")


class RenderedComment(TypedDict):
    id: str
    body: str
    created_at: str
    updated_at: str
    author: str | None
    blog_id: str


class RenderedPost(TypedDict, total=False):
    id: str
    title: str
    body: str
    published: bool
    created_at: str
    updated_at: str
    author: str | None
    comments_count: int
    # extended view only
    comments: list[RenderedComment]
