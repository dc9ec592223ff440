"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export versioning, canonical serialization and the error taxonomy.

Checkpoint models live in core.schemas.checkpoint and are imported from
there directly; they depend on core.crypto, which itself depends on this
package's canonical serializer.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    STORE_FORMAT_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
    is_compatible_store_format,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    AnchorError,
    AnchorException,
    AnchorNotFoundException,
    CanonicalizationException,
    CheckpointNotFoundException,
    CheckpointStoreException,
    DuplicateLeafPathException,
    ErrorCodes,
    LeafReadException,
    ProofIndexOutOfRangeException,
    StoreRejectedException,
    StoreUnavailableException,
)

__all__ = [
    "SCHEMA_VERSION",
    "STORE_FORMAT_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SchemaVersion",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    "is_compatible_store_format",
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "ensure_utc",
    "format_datetime_canonical",
    "loads_canonical",
    "AnchorError",
    "AnchorException",
    "AnchorNotFoundException",
    "CanonicalizationException",
    "CheckpointNotFoundException",
    "CheckpointStoreException",
    "DuplicateLeafPathException",
    "ErrorCodes",
    "LeafReadException",
    "ProofIndexOutOfRangeException",
    "StoreRejectedException",
    "StoreUnavailableException",
]
