"""Auto-publish component - publishes new posts after a delay."""

from src.components.auto_publish.component import (
    AUTO_PUBLISH_TASK,
    DEFAULT_DELAY,
    AutoPublishTask,
    schedule_auto_publish,
)
from src.components.auto_publish.ports import PostRepoPort, PublisherPort, TaskSchedulerPort

__all__ = [
    "AUTO_PUBLISH_TASK",
    "DEFAULT_DELAY",
    "AutoPublishTask",
    "schedule_auto_publish",
    # Ports
    "PostRepoPort",
    "PublisherPort",
    "TaskSchedulerPort",
]
