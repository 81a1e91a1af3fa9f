import argparse
import logging
import os
import sys
import time
from pathlib import Path

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.app_shell.config import ConfigurationError, validate_ops_rules
from src.app_shell.context import ServiceContext
from src.app_shell.seed import seed
from src.rules.loader import load_rules, rules_path_from_env

logger = logging.getLogger("cli")


def _data_dir() -> Path:
    return Path(os.environ.get("BLOG_DATA_DIR", "./data"))


def _db_path() -> str:
    return str(_data_dir() / "blog.db")


def get_context() -> ServiceContext:
    rules_path = rules_path_from_env()
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    rules = load_rules(rules_path)
    try:
        validate_ops_rules(rules)
    except ConfigurationError:
        sys.exit(1)
    return ServiceContext.create(_db_path(), rules)


def handle_migrate(args: argparse.Namespace) -> None:
    _data_dir().mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(_db_path()).run_migrations()
    print(f"Applied {len(applied)} migrations.")


def handle_seed(ctx: ServiceContext, args: argparse.Namespace) -> None:
    counts = seed(ctx)
    print(
        f"Seeded {counts['published']} published posts, "
        f"{counts['drafts']} drafts, {counts['comments']} comments."
    )


def handle_run_due(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result = ctx.runner.run_due_tasks(max_tasks=args.max_tasks)
    print(
        f"Processed {result.total_processed} tasks "
        f"({result.succeeded} succeeded, {result.failed} failed)."
    )


def handle_worker(ctx: ServiceContext, args: argparse.Namespace) -> None:
    worker = ctx.create_worker(poll_interval_seconds=args.interval)
    worker.start()
    try:
        while worker.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping worker")
    finally:
        worker.stop()


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Blog Lab CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # seed
    subparsers.add_parser("seed", help="Replace posts and comments with demo data")

    # run_due
    run_due_parser = subparsers.add_parser("run_due", help="Run deferred tasks that are due")
    run_due_parser.add_argument("--max-tasks", type=int, default=10, help="Batch size")

    # worker
    worker_parser = subparsers.add_parser("worker", help="Poll for due tasks until stopped")
    worker_parser.add_argument("--interval", type=float, help="Poll interval in seconds")

    args = parser.parse_args(argv)

    if args.command == "migrate":
        handle_migrate(args)
        return

    ctx = get_context()

    if args.command == "seed":
        handle_seed(ctx, args)
    elif args.command == "run_due":
        handle_run_due(ctx, args)
    elif args.command == "worker":
        handle_worker(ctx, args)


if __name__ == "__main__":
    main()
