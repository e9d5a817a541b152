"""Configuration file loading.

Config is merged from two JSON files, global first and local second:
1. ~/.config/race-planner/race-planner.json
2. ./race-planner.json

Recognised keys: "pace" (M:SS), "target" (H:MM), "uniform_checkpoints" (int).
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "race-planner"
CONFIG_PATH = CONFIG_DIR / "race-planner.json"
LOCAL_CONFIG_PATH = Path("race-planner.json")


def _load_config() -> dict:
    """Load and merge config files.

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", config_path, e)
                continue
    return config
