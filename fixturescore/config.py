"""
Configuration management.

Loads settings from environment variables. Host applications can extend
this config dict with their own keys.
"""

import os

config = {
    "FIXTURESCORE_PROFILE": os.environ.get("FIXTURESCORE_PROFILE", "default"),
    "FIXTURESCORE_PROFILES_DIR": os.environ.get("FIXTURESCORE_PROFILES_DIR", ""),
    "FIXTURESCORE_MAX_WORKERS": int(os.environ.get("FIXTURESCORE_MAX_WORKERS", "1") or 1),
    "FIXTURESCORE_MAX_REASONS": int(os.environ.get("FIXTURESCORE_MAX_REASONS", "0") or 0),
}


def register_config_keys(keys: dict):
    """
    Register additional config keys from a host application.

    Args:
        keys: Dict of key -> value pairs to add to the global config.
              Existing keys are NOT overwritten.
    """
    for k, v in keys.items():
        if k not in config:
            config[k] = v
