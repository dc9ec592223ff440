"""
Module 09 - CLI Verify Command

Check that a file (or exact content) was part of a stored checkpoint.

Usage:
    anchor verify MEMORY.md
    anchor verify memory/2026-02-03.md --checkpoint 0
    anchor verify --content "I decided to pivot" --checkpoint 1
    anchor verify GOALS.md --remote --json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional

from core.checkpoint.verify import InclusionReport, find_content, verify_leaf_inclusion
from core.config.runtime import RuntimeConfig
from core.schemas.checkpoint import CheckpointRecord
from core.schemas.errors import AnchorException
from orchestrator.pipeline import create_authoritative_store
from orchestrator.store.store import LocalCheckpointStore


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_record(store: LocalCheckpointStore, checkpoint_id: Optional[int]) -> Optional[CheckpointRecord]:
    """Requested checkpoint, or the latest one."""
    if checkpoint_id is None:
        return store.latest()
    return store.get(checkpoint_id)


def read_current(root: Path, record: CheckpointRecord, file_arg: str) -> Optional[bytes]:
    """
    Current bytes of the file, or None if it no longer exists.

    A relative argument is resolved against the checkpoint first, so a
    basename reads the leaf it matched (memory/x.md, not x.md).
    """
    path = Path(file_arg)
    if not path.is_absolute():
        leaf = record.leaf_for(file_arg)
        path = root / (leaf.path if leaf is not None else file_arg)
    if not path.is_file():
        return None
    return path.read_bytes()


def print_report_human(report: InclusionReport) -> None:
    print(f"checkpoint: {report.checkpoint_id}")
    print(f"root: {report.root}")
    if not report.found:
        print(f"file: {report.path}")
        print("found: false")
        return
    print(f"file: {report.path}")
    print(f"checkpoint_hash: {report.leaf.content_hash}")
    if report.current_hash:
        print(f"current_hash:    {report.current_hash}")
    print(f"status: {report.status.value}")
    print(f"proof_valid: {str(report.proof_valid).lower()}")
    if report.remote_valid is not None:
        print(f"remote_valid: {str(report.remote_valid).lower()}")


def verify_content(record: CheckpointRecord, text: str, output_json: bool) -> int:
    matches = find_content(record, text.encode("utf-8"))
    if output_json:
        print(json.dumps({
            "checkpoint_id": record.checkpoint_id,
            "found": bool(matches),
            "paths": [leaf.path for leaf in matches],
        }, indent=2))
    elif matches:
        for leaf in matches:
            print(f"found: {leaf.path} ({leaf.content_hash[:18]}...)")
    else:
        print("found: false")
        print("(digests cover whole files, not substrings)")
    return EXIT_SUCCESS if matches else EXIT_VERIFICATION_FAILED


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 when the file is not in the checkpoint or a proof
        check fails)
    """
    config: RuntimeConfig = args.runtime_config
    store = LocalCheckpointStore(config.store.directory)

    try:
        record = load_record(store, args.checkpoint)
    except AnchorException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    if record is None:
        print("Error: No checkpoints stored", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.content is not None:
        return verify_content(record, args.content, args.json)

    if not args.file:
        for path in record.paths:
            print(path)
        return EXIT_SUCCESS

    remote = None
    if args.remote:
        if not config.registry.endpoint:
            print("Error: --remote needs registry.endpoint (or ANCHOR_REGISTRY_URL)", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        remote = create_authoritative_store(config)

    current = read_current(Path(config.sources.root), record, args.file)
    try:
        report = verify_leaf_inclusion(record, args.file, current, remote=remote)
    except AnchorException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report_human(report)

    if report.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
