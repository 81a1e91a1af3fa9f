"""Blog component - posts and comments."""

from src.components.blog.component import BlogComponent
from src.components.blog.ports import ClockPort, CommentRepoPort, PostRepoPort, TaskSchedulerPort

__all__ = [
    "BlogComponent",
    # Ports
    "ClockPort",
    "CommentRepoPort",
    "PostRepoPort",
    "TaskSchedulerPort",
]
