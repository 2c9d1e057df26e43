# Area: Shared
"""
roping_engine._config — Configuration
=====================================

Loads settings from an optional JSON file, then from environment
variables (a ``.env`` file in the working directory is read first).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger("roping_engine")

DEFAULT_CONFIG: Dict[str, Any] = {
    "db_path": "roping.db",
    "log_file": "roping_engine.log",
    "log_level": "INFO",
    "draw_seed": None,
}

# Environment variable -> config key
ENV_MAPPINGS = {
    "ROPING_DB_PATH": "db_path",
    "ROPING_LOG_FILE": "log_file",
    "ROPING_LOG_LEVEL": "log_level",
    "ROPING_DRAW_SEED": "draw_seed",
}

REQUIRED_CONFIG_KEYS = [
    "db_path",
    "log_file",
    "log_level",
]

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(config_path: Optional[str] = None, use_dotenv: bool = True) -> Dict[str, Any]:
    """
    Load config from defaults, a JSON file, and the environment.

    Args:
        config_path: Optional path to a JSON config file
        use_dotenv: Read a .env file into the environment first

    Returns:
        Validated config dict
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning("Config file %s not found, using defaults", config_path)

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    validate_config(config)
    if config["draw_seed"] is not None:
        config["draw_seed"] = int(config["draw_seed"])
    config["log_level"] = str(config["log_level"]).upper()
    return config


def validate_config(config: dict) -> None:
    """
    Validate required configuration keys and values.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing or values are unusable
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    if str(config["log_level"]).upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log_level: {config['log_level']}")

    seed = config.get("draw_seed")
    if seed is not None:
        try:
            int(seed)
        except (TypeError, ValueError):
            raise ValueError(f"draw_seed must be an integer, got {seed!r}") from None


def log_level_value(config: Dict[str, Any]) -> int:
    """Get the numeric logging level for a config."""
    return getattr(logging, str(config["log_level"]).upper())
