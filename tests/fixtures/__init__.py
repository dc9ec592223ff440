"""
Test fixtures package for memory anchor tests.

This package provides factory functions for creating test objects.
- common.py: record, workspace and store factories shared by all modules

Usage:
    from fixtures import make_record, make_workspace

    def test_something(tmp_path):
        record = make_record({"a.txt": b"hello"})
        root = make_workspace(tmp_path, {"MEMORY.md": b"notes"})
"""

from .common import (
    DEFAULT_CONTENTS,
    FIXED_NOW,
    FlakyStore,
    make_leaf_contents,
    make_record,
    make_workspace,
    toy_hash,
)

__all__ = [
    "DEFAULT_CONTENTS",
    "FIXED_NOW",
    "FlakyStore",
    "make_leaf_contents",
    "make_record",
    "make_workspace",
    "toy_hash",
]
