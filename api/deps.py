"""
Module 08 - API Dependencies

Dependency injection for the API. Routes take the store through
`Depends(get_checkpoint_store)` so tests can swap in a temporary one via
`app.dependency_overrides`.
"""

from __future__ import annotations

import logging
import os

from core.config.runtime import RuntimeConfig, load_config
from orchestrator.store.store import LocalCheckpointStore

logger = logging.getLogger(__name__)


def get_runtime_config() -> RuntimeConfig:
    """
    Load the runtime config for a request.

    ANCHOR_CONFIG names a YAML file; otherwise ./anchor.yaml is used if
    present. Environment variables always override file values.
    """
    return load_config(os.getenv("ANCHOR_CONFIG"))


def get_checkpoint_store() -> LocalCheckpointStore:
    config = get_runtime_config()
    logger.debug("Using checkpoint store at %s", config.store.directory)
    return LocalCheckpointStore(config.store.directory)
