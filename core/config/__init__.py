"""
Runtime Configuration Module

Provides configuration loading and management for memory anchoring.
"""

from .runtime import (
    DEFAULT_CONFIG_FILENAME,
    HashingConfig,
    RegistryConfig,
    RuntimeConfig,
    SourcesConfig,
    StoreConfig,
    get_default_config,
    load_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "HashingConfig",
    "RegistryConfig",
    "RuntimeConfig",
    "SourcesConfig",
    "StoreConfig",
    "get_default_config",
    "load_config",
    "set_default_config",
]
