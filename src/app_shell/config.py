import logging
import os

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when the environment cannot satisfy the ops rules."""


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    """
    ops = rules.ops

    # 1. Check Required Env
    missing = [env_var for env_var in ops.required_env if env_var not in os.environ]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    # 2. Bootstrap admin credentials are optional; seeding falls back to defaults
    bootstrap = ops.bootstrap_admin
    if bootstrap.password_env not in os.environ:
        logger.warning(
            "%s is not set; the seeded admin account will have no usable password",
            bootstrap.password_env,
        )

    logger.info("Configuration validated")


def admin_credentials(rules: Rules) -> tuple[str, str | None]:
    """Email and password for the bootstrap admin, read from the environment."""
    bootstrap = rules.ops.bootstrap_admin
    email = os.environ.get(bootstrap.email_env, bootstrap.default_email)
    password = os.environ.get(bootstrap.password_env)
    return email, password
