import copy
import os
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

DEFAULTS = {
    "athlete": {
        "body_weight_lbs": 192,
        "goal": "maintenance",
    },
    "intervals": {
        "athlete_id": None,
        "api_key": None,
        "base_url": "https://intervals.icu/api/v1",
        "timeout_s": 30,
        "max_completion_fetches": 15,
    },
    "planning": {
        "carb_loading_days": [1, 3],
    },
    "review": {
        "host": "127.0.0.1",
        "port": 5057,
    },
}


def _expand(value):
    """Recursively expand ~ and env vars in string values."""
    if isinstance(value, str):
        return os.path.expandvars(os.path.expanduser(value))
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _merge(base: dict, override: dict) -> dict:
    """Deep-merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config() -> dict:
    return copy.deepcopy(DEFAULTS)


def load_config(path=None):
    """Load YAML config over the built-in defaults, expanding ~ and $ENV_VARS."""
    path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return _merge(DEFAULTS, _expand(raw))
