"""
Module 09 - CLI Checkpoint Command

Build a checkpoint of the configured files, publish its root and store
the record locally.

Usage:
    anchor checkpoint [--dry-run] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.config.runtime import RuntimeConfig
from core.schemas.checkpoint import CheckpointRecord
from core.schemas.errors import AnchorException
from orchestrator.pipeline import RunResult, create_pipeline


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_leaves(record: CheckpointRecord) -> None:
    """Print one block per leaf."""
    print(f"files ({record.metadata.leaf_count}):")
    for leaf in record.leaves:
        print(f"  {leaf.path}")
        print(f"    hash: {leaf.content_hash[:18]}...")
        print(f"    size: {leaf.size} bytes")


def print_result_human(result: RunResult) -> None:
    record = result.record
    print_leaves(record)
    print()
    print(f"root: {record.root}")
    print(f"files: {record.metadata.leaf_count}")
    print(f"bytes: {record.metadata.total_bytes}")
    if result.dry_run:
        print("dry_run: true (not published, not stored)")
        return
    anchor = record.anchor
    print(f"checkpoint_id: {record.checkpoint_id}")
    if anchor is None:
        print("anchored: false (no registry endpoint configured)")
        return
    print(f"sequence: {anchor.sequence}")
    if anchor.tx_hash:
        print(f"tx_hash: {anchor.tx_hash}")
    if anchor.block_number is not None:
        print(f"block: {anchor.block_number}")


def checkpoint_cmd(args: Namespace) -> int:
    """
    Execute the checkpoint command.

    Returns:
        Exit code
    """
    config: RuntimeConfig = args.runtime_config
    pipeline = create_pipeline(config, dry_run=args.dry_run)

    try:
        result = pipeline.run()
    except AnchorException as e:
        logger.error("Checkpoint failed: %s", e.message)
        if args.json:
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump()}, indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_result_human(result)
    return EXIT_SUCCESS
