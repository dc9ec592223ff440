"""
Module 01 - Schemas & Canonicalization
File: checkpoint.py

Purpose: Data model for checkpoints.

- LeafRecord: one content item (path, digest, size, observation time)
- CheckpointMetadata: leaf count and total bytes
- AnchorReference: where the root was published in the authoritative store
- AnchoredCheckpoint: what the authoritative store returns for a sequence
- CheckpointRecord: the immutable bundle of root, leaves and per-leaf proofs
- DiffResult: classification of path changes between two checkpoints

All digests are 0x-prefixed lowercase hex strings. Records are frozen;
"changing" one (assigning a store id, attaching an anchor) returns a copy.
"""

from __future__ import annotations

import posixpath
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HASH_ALGORITHMS, from_hex
from core.merkle.merkle_tree import MerkleProof
from core.schemas.canonical import dumps_canonical, format_datetime_canonical
from core.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version


# 0x followed by 64 hex chars = 32 bytes
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate a 32-byte hex digest with 0x prefix, normalized to lowercase."""
    if not isinstance(value, str) or not HEX_HASH_PATTERN.match(value):
        shown = value[:20] + "..." if isinstance(value, str) and len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a 32-byte hex string with 0x prefix "
            f"(64 hex chars), got: {shown!r}"
        )
    return value.lower()


class LeafRecord(BaseModel):
    """
    One hashed content item in a checkpoint.

    `path` is the logical identifier (e.g. "MEMORY.md" or
    "memory/2026-02-03.md") and is unique within a checkpoint.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(..., min_length=1, description="Logical path of the item")
    content_hash: str = Field(..., description="Leaf digest (0x-prefixed, 32 bytes)")
    size: int = Field(..., ge=0, description="Content size in bytes")
    observed_at: datetime = Field(..., description="When the content was captured")

    @field_validator("content_hash")
    @classmethod
    def _validate_content_hash(cls, v: str) -> str:
        return validate_hex_hash(v, "content_hash")

    @property
    def digest(self) -> bytes:
        return from_hex(self.content_hash)

    @property
    def basename(self) -> str:
        return posixpath.basename(self.path)


class CheckpointMetadata(BaseModel):
    """Aggregate figures published alongside the root."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_count: int = Field(..., ge=0)
    total_bytes: int = Field(..., ge=0)


class AnchorReference(BaseModel):
    """
    External reference assigned when a root is committed.

    `sequence` is the checkpoint index in the registry (per agent). The
    remaining fields are informational and depend on the store.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    sequence: int = Field(..., ge=0, description="Checkpoint index in the registry")
    block_number: Optional[int] = Field(default=None, ge=0)
    tx_hash: Optional[str] = Field(default=None)
    network: Optional[str] = Field(default=None)
    registry: Optional[str] = Field(default=None, description="Registry address or URL")
    anchored_at: Optional[datetime] = Field(default=None)


class AnchoredCheckpoint(BaseModel):
    """A checkpoint as held by the authoritative store."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sequence: int = Field(..., ge=0)
    root: str
    metadata: str = Field(default="", description="Opaque metadata string as submitted")
    timestamp: datetime
    block_number: Optional[int] = Field(default=None, ge=0)

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: str) -> str:
        return validate_hex_hash(v, "root")


class CheckpointRecord(BaseModel):
    """
    Immutable bundle produced once per commit cycle.

    Holds everything needed to replay an inclusion check offline: the
    root, the ordered leaves and a parallel list of sibling proofs.
    Losing this record leaves the published root unable to say which
    items it covered.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    checkpoint_id: Optional[int] = Field(
        default=None,
        ge=0,
        description="Local store id, assigned on append",
    )
    root: str = Field(..., description="Merkle root (0x-prefixed, 32 bytes)")
    timestamp: datetime = Field(..., description="When the checkpoint was built")
    hash_algorithm: str = Field(default=DEFAULT_HASH_ALGORITHM)
    anchor: Optional[AnchorReference] = Field(
        default=None,
        description="Set once the root is committed externally",
    )
    metadata: CheckpointMetadata
    leaves: tuple[LeafRecord, ...] = Field(default=())
    proofs: tuple[tuple[str, ...], ...] = Field(
        default=(),
        description="Sibling digests per leaf, parallel to `leaves`",
    )

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: str) -> str:
        return validate_hex_hash(v, "root")

    @field_validator("hash_algorithm")
    @classmethod
    def _validate_algorithm(cls, v: str) -> str:
        if v not in HASH_ALGORITHMS:
            raise ValueError(f"Unknown hash algorithm: {v!r}")
        return v

    @field_validator("proofs")
    @classmethod
    def _validate_proofs(cls, v: tuple[tuple[str, ...], ...]) -> tuple[tuple[str, ...], ...]:
        return tuple(
            tuple(validate_hex_hash(s, f"proofs[{i}][{j}]") for j, s in enumerate(siblings))
            for i, siblings in enumerate(v)
        )

    @model_validator(mode="after")
    def _validate_consistency(self) -> "CheckpointRecord":
        if len(self.proofs) != len(self.leaves):
            raise ValueError(
                f"proofs must be parallel to leaves: {len(self.proofs)} proofs "
                f"for {len(self.leaves)} leaves"
            )
        if self.metadata.leaf_count != len(self.leaves):
            raise ValueError(
                f"metadata.leaf_count={self.metadata.leaf_count} does not match "
                f"{len(self.leaves)} leaves"
            )
        total = sum(leaf.size for leaf in self.leaves)
        if self.metadata.total_bytes != total:
            raise ValueError(
                f"metadata.total_bytes={self.metadata.total_bytes} does not match "
                f"sum of leaf sizes {total}"
            )
        seen: set[str] = set()
        for leaf in self.leaves:
            if leaf.path in seen:
                raise ValueError(f"Duplicate leaf path: {leaf.path}")
            seen.add(leaf.path)
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.root)

    @property
    def is_anchored(self) -> bool:
        return self.anchor is not None

    @property
    def paths(self) -> list[str]:
        return [leaf.path for leaf in self.leaves]

    def index_of(self, path: str) -> int | None:
        """
        Position of a leaf by logical path.

        An exact path match wins. Otherwise a bare file name matches a
        leaf whose basename equals it, provided exactly one leaf does.
        """
        for i, leaf in enumerate(self.leaves):
            if leaf.path == path:
                return i
        name = posixpath.basename(path.replace("\\", "/"))
        matches = [i for i, leaf in enumerate(self.leaves) if leaf.basename == name]
        if len(matches) == 1:
            return matches[0]
        return None

    def leaf_for(self, path: str) -> LeafRecord | None:
        index = self.index_of(path)
        return None if index is None else self.leaves[index]

    def proof_at(self, index: int) -> MerkleProof:
        """
        Raises:
            IndexError: If index is out of range
        """
        leaf = self.leaves[index]
        return MerkleProof(
            leaf=leaf.digest,
            index=index,
            siblings=[from_hex(s) for s in self.proofs[index]],
            root=self.root_bytes,
        )

    def proof_for(self, path: str) -> MerkleProof | None:
        index = self.index_of(path)
        return None if index is None else self.proof_at(index)

    def find_by_hash(self, content_hash: str) -> list[LeafRecord]:
        target = content_hash.lower()
        return [leaf for leaf in self.leaves if leaf.content_hash == target]

    # ------------------------------------------------------------------
    # Derived copies
    # ------------------------------------------------------------------

    def with_anchor(self, anchor: AnchorReference) -> "CheckpointRecord":
        return self.model_copy(update={"anchor": anchor})

    def with_checkpoint_id(self, checkpoint_id: int) -> "CheckpointRecord":
        return self.model_copy(update={"checkpoint_id": checkpoint_id})

    def anchor_payload(self) -> str:
        """
        Metadata string submitted with the root.

        Canonical JSON so a resubmission carries byte-identical metadata:
        {"bytes": <total>, "files": <count>, "timestamp": "<ISO-8601 Z>"}
        """
        return dumps_canonical({
            "files": self.metadata.leaf_count,
            "bytes": self.metadata.total_bytes,
            "timestamp": format_datetime_canonical(self.timestamp),
        })


class DiffResult(BaseModel):
    """
    Path-level changes from checkpoint A to checkpoint B.

    Path collections are sorted tuples so results compare and print
    deterministically.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    added: tuple[str, ...] = Field(default=())
    removed: tuple[str, ...] = Field(default=())
    modified: tuple[str, ...] = Field(default=())
    unchanged_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)

    @property
    def changed_count(self) -> int:
        return len(self.added) + len(self.removed) + len(self.modified)


__all__ = [
    "HEX_HASH_PATTERN",
    "validate_hex_hash",
    "LeafRecord",
    "CheckpointMetadata",
    "AnchorReference",
    "AnchoredCheckpoint",
    "CheckpointRecord",
    "DiffResult",
]
