"""
Module 04 - Checkpoint Building
File: diff.py

Purpose: Compare the leaf sets of two checkpoints.
"""

from __future__ import annotations

from core.schemas.checkpoint import CheckpointRecord, DiffResult


def diff_checkpoints(a: CheckpointRecord, b: CheckpointRecord) -> DiffResult:
    """
    Classify every path in either checkpoint, going from A to B.

    - only in B: added
    - only in A: removed
    - in both, digests differ: modified
    - in both, digests equal: counted in unchanged_count

    Leaf order and root are ignored; only path -> digest matters.
    """
    a_hashes = {leaf.path: leaf.content_hash for leaf in a.leaves}
    b_hashes = {leaf.path: leaf.content_hash for leaf in b.leaves}

    added = sorted(b_hashes.keys() - a_hashes.keys())
    removed = sorted(a_hashes.keys() - b_hashes.keys())
    common = a_hashes.keys() & b_hashes.keys()
    modified = sorted(p for p in common if a_hashes[p] != b_hashes[p])

    return DiffResult(
        added=tuple(added),
        removed=tuple(removed),
        modified=tuple(modified),
        unchanged_count=len(common) - len(modified),
    )


__all__ = ["diff_checkpoints"]
