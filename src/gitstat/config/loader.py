"""
Configuration loader for gitstat.

A repository may carry an optional JSON file named ``.gitstat.json`` in
its root to provide defaults for the command line::

    {"project_name": "backend", "output": "stats/history.json"}

A missing file means no configuration. If the file exists but cannot be
read, is not a JSON object, or has keys of the wrong type, a
:class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings when the CLI has not
# configured logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILENAME = ".gitstat.json"

# key -> expected type
OPTIONAL_KEYS = {
    "project_name": str,
    "output": str,
}


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""

    pass


def get_config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILENAME


def load_config(repo_root: Path) -> Dict[str, Any]:
    """Load the gitstat configuration of a repository.

    Args:
        repo_root: Root directory of the Git repository.

    Returns:
        A dictionary with any of the keys:
        - project_name (str): Name written into the output document
        - output (str): Default output file path
        Unknown keys are kept but ignored by the CLI.

    Raises:
        ConfigError: If the file exists but is malformed or invalid.
    """
    config_path = get_config_path(repo_root)

    if not config_path.exists():
        logger.debug("No configuration file at %s", config_path)
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    for key, expected in OPTIONAL_KEYS.items():
        if key in data and not isinstance(data[key], expected):
            raise ConfigError(f"'{key}' must be a {expected.__name__}")
        if key in data and not data[key].strip():
            raise ConfigError(f"'{key}' must not be empty")

    logger.debug("Loaded configuration from: %s", config_path)
    logger.debug("Configuration data: %s", data)
    return data
