"""Time source shared by services and the task queue."""

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Current time as a naive UTC datetime."""
        ...
