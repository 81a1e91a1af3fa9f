"""Publish component - manages the published flag of blog posts."""

from src.components.publish.component import PublishComponent
from src.components.publish.ports import ClockPort, PostRepoPort

__all__ = [
    # Component
    "PublishComponent",
    # Ports
    "PostRepoPort",
    "ClockPort",
]
