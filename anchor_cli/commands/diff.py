"""
Module 09 - CLI Diff Command

Usage:
    anchor diff 0 1 [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.checkpoint.diff import diff_checkpoints
from core.schemas.checkpoint import DiffResult
from core.schemas.errors import AnchorException
from orchestrator.store.store import LocalCheckpointStore


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_diff_human(a: int, b: int, result: DiffResult) -> None:
    print(f"checkpoint {a} -> {b}")
    for path in result.added:
        print(f"  + {path}")
    for path in result.removed:
        print(f"  - {path}")
    for path in result.modified:
        print(f"  ~ {path}")
    print(
        f"added: {len(result.added)}, removed: {len(result.removed)}, "
        f"modified: {len(result.modified)}, unchanged: {result.unchanged_count}"
    )


def diff_cmd(args: Namespace) -> int:
    store = LocalCheckpointStore(args.runtime_config.store.directory)
    try:
        result = diff_checkpoints(store.get(args.a), store.get(args.b))
    except AnchorException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        data = {"a": args.a, "b": args.b, **result.model_dump(mode="json")}
        print(json.dumps(data, indent=2))
    else:
        print_diff_human(args.a, args.b, result)
    return EXIT_SUCCESS
