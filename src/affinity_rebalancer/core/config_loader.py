"""
config_loader.py
- Loads the YAML configuration file used by the rebalancer.
- Supports rebalance_config.yml (defaults, backend options, per-service preferences).
"""

import os

import yaml
from loguru import logger


def load_yaml(path):
    """Safely load a YAML file and return a parsed dict. Returns {} on failure."""
    if not path or not os.path.exists(path):
        logger.debug(f"[config] No config file at {path}, using defaults")
        return {}
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"[config] Failed to load {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"[config] Expected a mapping at the top of {path}, got {type(data).__name__}")
        return {}
    return data


def get_default(config, key, fallback=None):
    """Read a key from the `default:` section of a loaded config."""
    return (config.get("default") or {}).get(key, fallback)


def get_service_preferences(config, service_name):
    """Return the raw `services.<name>.preferences` document, or None."""
    service_cfg = (config.get("services") or {}).get(service_name) or {}
    return service_cfg.get("preferences")
