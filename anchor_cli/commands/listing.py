"""
Module 09 - CLI List Command

Usage:
    anchor list                     # stored checkpoints
    anchor list --checkpoint 3      # files in checkpoint 3
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.schemas.errors import AnchorException
from orchestrator.store.store import LocalCheckpointStore


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def list_checkpoints(store: LocalCheckpointStore, output_json: bool) -> int:
    entries = store.list_entries()
    if output_json:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return EXIT_SUCCESS
    if not entries:
        print("No checkpoints stored")
        return EXIT_SUCCESS
    for e in entries:
        sequence = "-" if e.anchor_sequence is None else e.anchor_sequence
        print(f"#{e.checkpoint_id}  {e.timestamp}  root={e.root[:18]}...  sequence={sequence}")
    return EXIT_SUCCESS


def list_leaves(store: LocalCheckpointStore, checkpoint_id: int, output_json: bool) -> int:
    record = store.get(checkpoint_id)
    if output_json:
        print(json.dumps([leaf.model_dump(mode="json") for leaf in record.leaves], indent=2))
        return EXIT_SUCCESS
    print(f"checkpoint {checkpoint_id}: {record.metadata.leaf_count} files, {record.metadata.total_bytes} bytes")
    for leaf in record.leaves:
        print(f"  {leaf.path}  {leaf.content_hash[:18]}...  {leaf.size} bytes")
    return EXIT_SUCCESS


def list_cmd(args: Namespace) -> int:
    store = LocalCheckpointStore(args.runtime_config.store.directory)
    try:
        if args.checkpoint is None:
            return list_checkpoints(store, args.json)
        return list_leaves(store, args.checkpoint, args.json)
    except AnchorException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
