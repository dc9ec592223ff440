"""
Module 04 - Checkpoint Building

Leaf sources, checkpoint construction, diffing and inclusion checks.
"""

from .sources import FileLeafSource, LeafContent, LeafSource, StaticLeafSource
from .builder import build_checkpoint, build_checkpoint_from_contents
from .diff import diff_checkpoints
from .verify import (
    FileStatus,
    InclusionReport,
    find_content,
    verify_all_proofs,
    verify_leaf_inclusion,
)

__all__ = [
    "LeafContent",
    "LeafSource",
    "StaticLeafSource",
    "FileLeafSource",
    "build_checkpoint",
    "build_checkpoint_from_contents",
    "diff_checkpoints",
    "FileStatus",
    "InclusionReport",
    "find_content",
    "verify_all_proofs",
    "verify_leaf_inclusion",
]
