# blog-lab - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.db import DeferredTaskRepoPort
from src.core.ports.jobs import (
    BatchResult,
    JobResult,
    JobStatus,
    TaskBody,
    TaskError,
    TaskRunnerPort,
    TaskSchedulerPort,
    UnknownTaskError,
    WorkerPort,
)

__all__ = [
    # Database
    "DeferredTaskRepoPort",
    # Jobs
    "BatchResult",
    "JobResult",
    "JobStatus",
    "TaskBody",
    "TaskError",
    "TaskRunnerPort",
    "TaskSchedulerPort",
    "UnknownTaskError",
    "WorkerPort",
]
