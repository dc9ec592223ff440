"""
Runtime Configuration

Central configuration for checkpoint building, local storage and the
registry connection.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM

load_dotenv()


DEFAULT_CONFIG_FILENAME = "anchor.yaml"


@dataclass
class HashingConfig:
    """Leaf and node hash function."""
    algorithm: str = DEFAULT_HASH_ALGORITHM


@dataclass
class SourcesConfig:
    """What gets checkpointed."""
    root: str = "."
    files: list[str] = field(default_factory=lambda: [
        "MEMORY.md",
        "AGENTS.md",
        "SOUL.md",
        "USER.md",
        "IDENTITY.md",
        "GOALS.md",
        "TOOLS.md",
        "HEARTBEAT.md",
    ])
    directories: list[str] = field(default_factory=lambda: ["memory"])
    pattern: str = "*.md"


@dataclass
class StoreConfig:
    """Local checkpoint store."""
    directory: str = "checkpoints"


@dataclass
class RegistryConfig:
    """
    Authoritative store connection.

    With no endpoint the in-memory store is used, which only makes sense
    for dry runs and tests.
    """
    endpoint: Optional[str] = None
    agent_id: str = "default"
    network: str = "testnet"
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hashing: HashingConfig = field(default_factory=HashingConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    log_level: str = "INFO"

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - ANCHOR_HASH_ALGORITHM: keccak256 or sha256
        - ANCHOR_WORKSPACE: Root directory of the leaf sources
        - ANCHOR_STORE_DIR: Local checkpoint directory
        - ANCHOR_REGISTRY_URL: Registry gateway endpoint
        - ANCHOR_AGENT_ID: Agent id in the registry
        - ANCHOR_NETWORK: Network label
        - ANCHOR_MAX_RETRIES: Submission retries
        - ANCHOR_RETRY_DELAY: Seconds between retries
        - ANCHOR_LOG_LEVEL: Logging level
        """
        overrides: dict[str, Any] = {}

        if os.getenv("ANCHOR_HASH_ALGORITHM"):
            overrides.setdefault("hashing", {})["algorithm"] = os.getenv("ANCHOR_HASH_ALGORITHM")

        if os.getenv("ANCHOR_WORKSPACE"):
            overrides.setdefault("sources", {})["root"] = os.getenv("ANCHOR_WORKSPACE")

        if os.getenv("ANCHOR_STORE_DIR"):
            overrides.setdefault("store", {})["directory"] = os.getenv("ANCHOR_STORE_DIR")

        if os.getenv("ANCHOR_REGISTRY_URL"):
            overrides.setdefault("registry", {})["endpoint"] = os.getenv("ANCHOR_REGISTRY_URL")
        if os.getenv("ANCHOR_AGENT_ID"):
            overrides.setdefault("registry", {})["agent_id"] = os.getenv("ANCHOR_AGENT_ID")
        if os.getenv("ANCHOR_NETWORK"):
            overrides.setdefault("registry", {})["network"] = os.getenv("ANCHOR_NETWORK")
        if os.getenv("ANCHOR_MAX_RETRIES"):
            overrides.setdefault("registry", {})["max_retries"] = int(os.getenv("ANCHOR_MAX_RETRIES"))
        if os.getenv("ANCHOR_RETRY_DELAY"):
            overrides.setdefault("registry", {})["retry_delay"] = float(os.getenv("ANCHOR_RETRY_DELAY"))

        if os.getenv("ANCHOR_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("ANCHOR_LOG_LEVEL").upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration from defaults plus environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hashing_data = data.get("hashing") or {}
        sources_data = data.get("sources") or {}
        store_data = data.get("store") or {}
        registry_data = data.get("registry") or {}

        return cls(
            hashing=HashingConfig(**hashing_data),
            sources=SourcesConfig(**sources_data),
            store=StoreConfig(**store_data),
            registry=RegistryConfig(**registry_data),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("hashing", "sources", "store", "registry"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hashing": asdict(self.hashing),
            "sources": asdict(self.sources),
            "store": asdict(self.store),
            "registry": asdict(self.registry),
            "log_level": self.log_level,
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def load_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load from `path` (or ./anchor.yaml if present), then overlay env vars.
    """
    if path is None and Path(DEFAULT_CONFIG_FILENAME).exists():
        path = DEFAULT_CONFIG_FILENAME
    if path is None:
        return RuntimeConfig.from_env()
    return RuntimeConfig.from_yaml(path).with_env_overrides()


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
