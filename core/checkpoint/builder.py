"""
Module 04 - Checkpoint Building
File: builder.py

Purpose: Turn a leaf source into an immutable CheckpointRecord.

Build order:
1. Capture every item's bytes from the source (atomic snapshot). Nothing
   is hashed until all content is in memory, so a concurrent edit can
   not produce a checkpoint mixing old and new states.
2. Hash each item into a leaf digest.
3. Build the tree over the digests in source order.
4. Derive one proof per leaf and bundle everything into the record.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from core.checkpoint.sources import LeafContent, LeafSource
from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, LeafHasher, to_hex
from core.merkle.merkle_tree import MerkleTree
from core.schemas.checkpoint import CheckpointMetadata, CheckpointRecord, LeafRecord
from core.schemas.errors import DuplicateLeafPathException


logger = logging.getLogger(__name__)


def build_checkpoint_from_contents(
    contents: Sequence[LeafContent],
    *,
    hasher: LeafHasher | None = None,
    now: datetime | None = None,
) -> CheckpointRecord:
    """
    Build a checkpoint from already captured contents.

    Args:
        contents: Items in leaf order
        hasher: Leaf hasher (defaults to keccak256)
        now: Checkpoint timestamp (defaults to current UTC time). Items
            without an observation time inherit it.

    Raises:
        DuplicateLeafPathException: If two items share a path
    """
    hasher = hasher or LeafHasher(DEFAULT_HASH_ALGORITHM)
    now = now or datetime.now(timezone.utc)

    seen: set[str] = set()
    for item in contents:
        if item.path in seen:
            raise DuplicateLeafPathException(item.path)
        seen.add(item.path)

    digests = [hasher(item.data) for item in contents]
    tree = MerkleTree.from_leaves(digests, hasher.hash_fn)

    leaves = tuple(
        LeafRecord(
            path=item.path,
            content_hash=to_hex(digest),
            size=len(item.data),
            observed_at=item.observed_at or now,
        )
        for item, digest in zip(contents, digests)
    )
    proofs = tuple(
        tuple(to_hex(s) for s in siblings)
        for siblings in tree.all_proofs()
    )

    record = CheckpointRecord(
        root=tree.root_hex,
        timestamp=now,
        hash_algorithm=hasher.algorithm,
        metadata=CheckpointMetadata(
            leaf_count=len(leaves),
            total_bytes=sum(leaf.size for leaf in leaves),
        ),
        leaves=leaves,
        proofs=proofs,
    )

    logger.info(
        "Built checkpoint: %d leaves, %d bytes, root=%s",
        record.metadata.leaf_count, record.metadata.total_bytes, record.root[:18],
    )
    return record


def build_checkpoint(
    source: LeafSource,
    *,
    hasher: LeafHasher | None = None,
    now: datetime | None = None,
) -> CheckpointRecord:
    """
    Snapshot a leaf source and build its checkpoint.

    Raises:
        LeafReadException: If the source fails to read any item. The whole
            build is abandoned; no partial record is produced.
        DuplicateLeafPathException: If the source repeats a path
    """
    contents = list(source.read_leaves())
    return build_checkpoint_from_contents(contents, hasher=hasher, now=now)


__all__ = [
    "build_checkpoint",
    "build_checkpoint_from_contents",
]
