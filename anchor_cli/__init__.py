"""
Module 09 - Memory Anchor CLI

Command-line interface for checkpointing and verification.

Usage:
    python -m anchor_cli checkpoint --dry-run
    python -m anchor_cli verify MEMORY.md
    python -m anchor_cli diff 0 1
    python -m anchor_cli list
"""

__version__ = "0.1.0"
