"""
config.py - Configuration loading for winquery.

Settings come from a JSON file (`config.json` in the working directory by
default) merged over `DEFAULT_CONFIG`. Nested sections are merged key by key
so a user file only needs the values it changes.
"""
from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from winquery.logger import get_logger

logger = get_logger(__name__)

CONFIG_FILE_NAME = "config.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        "host": "127.0.0.1",
        "port": 8080,
        "cors_origins": ["*"],
        "api_prefix": "/api/v1",
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(process)d - %(threadName)s - %(message)s",
    },
    "query": {
        "case_sensitive": False,  # substring filters and title ordering
    },
    "provider": {
        "backend": "auto",  # auto | pywinctl | pygetwindow
        "include_untitled": False,
        "visible_only": True,
    },
    "debug": False,
}


def merge_config(user_config: dict[str, Any], defaults: dict[str, Any] = DEFAULT_CONFIG) -> dict[str, Any]:
    """Overlays `user_config` on `defaults`, merging one level of nested sections."""
    merged = copy.deepcopy(defaults)
    for key, value in user_config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """
    Loads configuration from `config_path` (default: ./config.json).

    A missing or unreadable file is not an error: defaults are used and a
    warning is logged.
    """
    path = Path(config_path) if config_path is not None else Path.cwd() / CONFIG_FILE_NAME

    if not path.exists():
        logger.info(f"Config file not found at {path}. Using defaults.")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            user_config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Error loading config from {path}: {e}. Using defaults.")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        logger.warning(f"Config file {path} must contain a JSON object. Using defaults.")
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.info(f"Configuration loaded from: {path}")
    return merge_config(user_config)
