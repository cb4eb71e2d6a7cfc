"""
Configuration for flowcanvas tools.

Settings are read from a JSON file, looked up in this order:

1. an explicit path (``--config`` on the command line),
2. the ``FLOWCANVAS_CONFIG`` environment variable,
3. ``flowcanvas.json`` in the current working directory.

A missing or unreadable file means defaults. ``FLOWCANVAS_LOG_LEVEL``
overrides the configured log level.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FLOWCANVAS_CONFIG"
LOG_LEVEL_ENV_VAR = "FLOWCANVAS_LOG_LEVEL"
DEFAULT_CONFIG_FILENAME = "flowcanvas.json"


@dataclass(frozen=True)
class CanvasConfig:
    indent: int = 2
    log_level: str = "WARNING"
    strict_export: bool = False
    mermaid_direction: str = "TD"
    seed_welcome: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanvasConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if not _accepts(f.default, value):
                logger.warning("Ignoring config key %s: expected %s, got %r", f.name, type(f.default).__name__, value)
                continue
            values[f.name] = value
        return cls(**values)


def _accepts(default: Any, value: Any) -> bool:
    # bool is an int subclass; keep the two apart
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(default, bool) and isinstance(value, bool)
    if isinstance(default, int):
        # indent=None means compact JSON
        return value is None or isinstance(value, int)
    return isinstance(value, type(default))


def get_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def load_config(path: Optional[Union[str, Path]] = None) -> CanvasConfig:
    """Load configuration, falling back to defaults on any read problem."""
    config_path = get_config_path(path)
    config = CanvasConfig()
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Could not read config %s: %s", config_path, e)
            data = {}
        if isinstance(data, dict):
            config = CanvasConfig.from_dict(data)
        else:
            logger.warning("Config %s is not a JSON object; using defaults", config_path)

    env_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if env_level:
        config = replace(config, log_level=env_level)
    return config


def save_config(config: CanvasConfig, path: Optional[Union[str, Path]] = None) -> Path:
    config_path = get_config_path(path)
    data = {field.name: getattr(config, field.name) for field in fields(config)}
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return config_path
