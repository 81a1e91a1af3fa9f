import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)

RULES_PATH_ENV = "BLOG_RULES_PATH"
DEFAULT_RULES_FILE = "rules.yaml"


def rules_path_from_env(base_dir: Path | None = None) -> Path:
    """BLOG_RULES_PATH if set, else rules.yaml under base_dir (or the cwd)."""
    configured = os.environ.get(RULES_PATH_ENV)
    if configured:
        return Path(configured)
    return (base_dir or Path.cwd()) / DEFAULT_RULES_FILE


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")
    return data


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    data = _read_mapping(path)
    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.debug("Loaded rules %s from %s", rules.project.rules_version, path)
    return rules
