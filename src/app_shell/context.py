from __future__ import annotations

from dataclasses import dataclass

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import (
    SQLiteCommentRepo,
    SQLiteDeferredTaskRepo,
    SQLitePostRepo,
    SQLiteUserRepo,
)
from src.adapters.task_queue import TaskExecutor, TaskRunner, TaskScheduler, TaskWorker
from src.components.auto_publish import AUTO_PUBLISH_TASK, AutoPublishTask
from src.components.blog import BlogComponent
from src.components.publish import PublishComponent
from src.components.render import RenderComponent
from src.domain.policy import PolicyEngine
from src.ports.clock import ClockPort
from src.rules.models import Rules


@dataclass
class ServiceContext:
    blog: BlogComponent
    publisher: PublishComponent
    renderer: RenderComponent
    policy: PolicyEngine
    scheduler: TaskScheduler
    runner: TaskRunner
    user_repo: SQLiteUserRepo
    post_repo: SQLitePostRepo
    comment_repo: SQLiteCommentRepo
    task_repo: SQLiteDeferredTaskRepo
    rules: Rules
    clock: ClockPort

    @classmethod
    def create(cls, db_path: str, rules: Rules, clock: ClockPort | None = None) -> ServiceContext:
        clock = clock or SystemClock()

        # Adapters
        user_repo = SQLiteUserRepo(db_path)
        post_repo = SQLitePostRepo(db_path)
        comment_repo = SQLiteCommentRepo(db_path)
        task_repo = SQLiteDeferredTaskRepo(db_path)

        # Components
        publisher = PublishComponent(post_repo, clock, rules.content)
        scheduler = TaskScheduler(task_repo, clock)
        blog = BlogComponent(
            post_repo,
            comment_repo,
            scheduler,
            clock,
            content_rules=rules.content,
            scheduling_rules=rules.scheduling,
        )
        renderer = RenderComponent(comment_repo, user_repo)

        # Task queue
        executor = TaskExecutor({AUTO_PUBLISH_TASK: AutoPublishTask(post_repo, publisher)})
        runner = TaskRunner(
            task_repo,
            executor,
            clock,
            max_attempts=rules.scheduling.max_attempts,
            retry_delay_seconds=rules.scheduling.retry_delay_seconds,
        )

        return cls(
            blog=blog,
            publisher=publisher,
            renderer=renderer,
            policy=PolicyEngine(rules.policy),
            scheduler=scheduler,
            runner=runner,
            user_repo=user_repo,
            post_repo=post_repo,
            comment_repo=comment_repo,
            task_repo=task_repo,
            rules=rules,
            clock=clock,
        )

    def create_worker(self, poll_interval_seconds: float | None = None) -> TaskWorker:
        if poll_interval_seconds is None:
            poll_interval_seconds = self.rules.scheduling.poll_interval_seconds
        return TaskWorker(
            self.runner,
            poll_interval_seconds=poll_interval_seconds,
            max_tasks_per_run=self.rules.scheduling.max_tasks_per_run,
        )
