"""
Module 04 - Checkpoint Building
File: verify.py

Purpose: Inclusion checks against a stored checkpoint.

Given a checkpoint record, a file path and optionally the file's current
bytes, report:
- whether the path is in the checkpoint at all
- whether the current content still matches the checkpointed digest
  (unchanged / modified / missing)
- whether the stored proof recomputes the checkpoint root
- optionally, whether the authoritative store accepts the proof too

Content lookup answers "was this exact content in the checkpoint, and
under which path". Digests cover whole files, not substrings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from core.crypto.hashing import LeafHasher, to_hex
from core.merkle.merkle_tree import verify_merkle_proof
from core.schemas.checkpoint import CheckpointRecord, LeafRecord

if TYPE_CHECKING:
    from core.anchor.base import AuthoritativeStore


logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    """Current state of a file relative to its checkpointed digest."""
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    MISSING = "missing"


@dataclass
class InclusionReport:
    """Result of verifying one path against one checkpoint."""
    path: str
    checkpoint_id: Optional[int]
    root: str
    found: bool
    leaf: Optional[LeafRecord] = None
    current_hash: Optional[str] = None
    status: Optional[FileStatus] = None
    proof: list[str] = field(default_factory=list)
    proof_valid: bool = False
    remote_valid: Optional[bool] = None

    @property
    def ok(self) -> bool:
        """Included, proof valid, and not rejected by the remote check."""
        return self.found and self.proof_valid and self.remote_valid is not False

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "checkpoint_id": self.checkpoint_id,
            "root": self.root,
            "found": self.found,
            "leaf": self.leaf.model_dump(mode="json") if self.leaf else None,
            "current_hash": self.current_hash,
            "status": self.status.value if self.status else None,
            "proof": list(self.proof),
            "proof_valid": self.proof_valid,
            "remote_valid": self.remote_valid,
            "ok": self.ok,
        }


def verify_leaf_inclusion(
    record: CheckpointRecord,
    path: str,
    current_content: Optional[bytes] = None,
    *,
    remote: Optional["AuthoritativeStore"] = None,
) -> InclusionReport:
    """
    Verify that `path` was part of `record`.

    Args:
        record: Checkpoint to verify against
        path: Logical path, or a bare file name matching a unique leaf
        current_content: The file's bytes now, or None if it no longer exists
        remote: Authoritative store to re-check the proof against. Only
            consulted when the record carries an anchor reference.

    Returns:
        InclusionReport. An unknown path yields found=False; it is not an
        error.
    """
    index = record.index_of(path)
    if index is None:
        logger.info("Path %s not found in checkpoint %s", path, record.checkpoint_id)
        return InclusionReport(
            path=path,
            checkpoint_id=record.checkpoint_id,
            root=record.root,
            found=False,
        )

    leaf = record.leaves[index]
    proof = record.proof_at(index)
    hasher = LeafHasher(record.hash_algorithm)

    report = InclusionReport(
        path=leaf.path,
        checkpoint_id=record.checkpoint_id,
        root=record.root,
        found=True,
        leaf=leaf,
        proof=list(record.proofs[index]),
        proof_valid=proof.verify(hasher.hash_fn),
    )

    if current_content is None:
        report.status = FileStatus.MISSING
    else:
        report.current_hash = to_hex(hasher(current_content))
        report.status = (
            FileStatus.UNCHANGED if report.current_hash == leaf.content_hash
            else FileStatus.MODIFIED
        )

    if remote is not None and record.anchor is not None:
        report.remote_valid = remote.verify_proof(
            record.anchor.sequence, proof.leaf, proof.siblings,
        )

    logger.info(
        "Verified %s in checkpoint %s: status=%s proof_valid=%s remote_valid=%s",
        leaf.path, record.checkpoint_id,
        report.status.value, report.proof_valid, report.remote_valid,
    )
    return report


def find_content(record: CheckpointRecord, content: bytes) -> list[LeafRecord]:
    """Leaves whose digest equals the digest of `content`."""
    digest = to_hex(LeafHasher(record.hash_algorithm)(content))
    return record.find_by_hash(digest)


def verify_all_proofs(record: CheckpointRecord) -> list[str]:
    """
    Re-check every stored proof against the record's root.

    Returns:
        Paths whose proof does not recompute the root (empty when the
        record is internally consistent)
    """
    hash_fn = LeafHasher(record.hash_algorithm).hash_fn
    root = record.root_bytes
    failures = []
    for index, leaf in enumerate(record.leaves):
        siblings = record.proof_at(index).siblings
        if not verify_merkle_proof(leaf.digest, siblings, root, hash_fn):
            failures.append(leaf.path)
    return failures


__all__ = [
    "FileStatus",
    "InclusionReport",
    "verify_leaf_inclusion",
    "find_content",
    "verify_all_proofs",
]
