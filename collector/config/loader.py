"""YAML config loader with runtime get/set."""

import json
from pathlib import Path
from typing import Any

import yaml

from collector.config.schema import CollectorConfig


def load_config(path: str | Path | None) -> CollectorConfig:
    """Load and validate config from a YAML file.

    A missing path or file yields the defaults. Cities left unset are
    resolved from the city directory at run time.
    """
    if path is None:
        return CollectorConfig()
    path = Path(path)
    if not path.exists():
        return CollectorConfig()
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return CollectorConfig(**raw)


def get_config_value(config: CollectorConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'fetch.max_attempts'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(
    config: CollectorConfig, dotted_key: str, value: Any
) -> CollectorConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new CollectorConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    # Attempt type coercion for common cases
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return CollectorConfig(**data)
