"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize checkpoint schema and store format version constants.
This file must stay tiny and import nothing from other schema files to
avoid circular dependencies.
"""

from typing import Literal

# Version stamped into every persisted CheckpointRecord
SCHEMA_VERSION: str = "v1"

# Version of the on-disk store layout (index + one file per record)
STORE_FORMAT_VERSION: str = "checkpoints.v1"

SchemaVersion = Literal["v1"]

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when a persisted record carries an unknown schema version."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_SCHEMA_VERSIONS
        super().__init__(
            f"Unsupported schema version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """
    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)


def parse_format_version(version: str) -> tuple[str, int]:
    """Parse "checkpoints.v1" into ("checkpoints", 1)."""
    if "." not in version:
        return version, 0
    prefix, _, suffix = version.rpartition(".")
    try:
        num = int(suffix.lstrip("v"))
    except ValueError:
        num = 0
    return prefix, num


def is_compatible_store_format(version: str) -> bool:
    """Same prefix required, version must be <= current."""
    prefix, num = parse_format_version(version)
    current_prefix, current_num = parse_format_version(STORE_FORMAT_VERSION)
    return prefix == current_prefix and num <= current_num
