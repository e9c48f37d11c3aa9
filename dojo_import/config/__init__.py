from __future__ import annotations

from .loader import DEFAULT_CONFIG_PATH, ConfigError, DatabaseConfig, ImportConfig, load_config

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "DatabaseConfig",
    "ImportConfig",
    "load_config",
]
