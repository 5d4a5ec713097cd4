"""Runtime configuration for reactorscan - centralized configuration management."""

import copy
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from reactorscan.utils.constants import (
    CONFIG_FILE,
    DEFAULT_GOAL_NAME,
    DEFAULT_GOAL_PREFIX,
    DEFAULT_PLUGIN_ARTIFACT_ID,
    DEFAULT_PLUGIN_GROUP_ID,
    DETACHED_EXECUTION_ID,
    ENV_PREFIX,
    REPORT_FILE,
)
from reactorscan.utils.logging import logger

DEFAULTS = {
    "reactor": {
        "detached_execution_id": DETACHED_EXECUTION_ID,
        "goal_prefix": DEFAULT_GOAL_PREFIX,
        "goal": DEFAULT_GOAL_NAME,
    },
    "plugin": {
        "group_id": DEFAULT_PLUGIN_GROUP_ID,
        "artifact_id": DEFAULT_PLUGIN_ARTIFACT_ID,
    },
    "compiler": {
        "default_source": "1.8",
        "default_target": "1.8",
    },
    "engine": {
        "app_name": "ScannerMaven",
        "command": [],
        "timeout": 3600,
    },
    "paths": {
        "report": str(REPORT_FILE),
        "secrets": "",
    },
}


def load_runtime_config(root: str = ".", environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """
    Load runtime configuration from .rscan/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (REACTORSCAN_<SECTION>_<KEY>)
    2. .rscan/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file
        environ: Environment snapshot; no variables are consulted when None

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)
    environ = environ or {}

    path = Path(root) / CONFIG_FILE
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}{section.upper()}_{key.upper()}"
            if env_var not in environ:
                continue
            value = environ[env_var]
            default_value = cfg[section][key]
            try:
                if isinstance(default_value, bool):
                    cfg[section][key] = value.strip().lower() in ("1", "true", "yes")
                elif isinstance(default_value, int):
                    cfg[section][key] = int(value)
                elif isinstance(default_value, list):
                    cfg[section][key] = [v.strip() for v in value.split(",") if v.strip()]
                else:
                    cfg[section][key] = value
            except ValueError as e:
                logger.warning(f"Invalid value for environment variable {env_var}: '{value}' - {e}")
                logger.info(f"Using default value: {cfg[section][key]}")

    return cfg
