"""
Module 06 - Checkpoint Store
File: io.py

Purpose: On-disk layout of the local checkpoint store.

    <store dir>/
        index.json                 # StoreIndex, written after each record
        checkpoint-000000.json     # one canonical JSON file per record
        checkpoint-000001.json
        ...

Every record file is canonical JSON and its SHA-256 is kept in the
index, so a tampered or truncated file is detected on load.
"""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from core.schemas.canonical import dumps_canonical, format_datetime_canonical
from core.schemas.checkpoint import CheckpointRecord
from core.schemas.errors import CheckpointStoreException, ErrorCodes
from core.schemas.versioning import SCHEMA_VERSION, STORE_FORMAT_VERSION


INDEX_FILE = "index.json"
RECORD_FILE_TEMPLATE = "checkpoint-{:06d}.json"


class CheckpointHashMismatchError(CheckpointStoreException):
    """Record file content does not match the hash kept in the index."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Hash mismatch for {path}: expected {expected}, got {actual}",
            code=ErrorCodes.CHECKPOINT_HASH_MISMATCH,
            details={"path": path, "expected": expected, "actual": actual},
        )
        self.path = path
        self.expected = expected
        self.actual = actual


def dump_record(record: CheckpointRecord) -> bytes:
    """Serialize a record to canonical JSON bytes."""
    return dumps_canonical(record.model_dump(mode="json")).encode("utf-8")


def compute_sha256(data: bytes) -> str:
    """Compute SHA-256 hex digest of data."""
    return hashlib.sha256(data).hexdigest()


def record_filename(checkpoint_id: int) -> str:
    return RECORD_FILE_TEMPLATE.format(checkpoint_id)


@dataclass
class IndexEntry:
    """Index row for one stored record."""
    checkpoint_id: int
    path: str
    sha256: str
    size: int
    root: str
    timestamp: str
    anchor_sequence: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "checkpoint_id": self.checkpoint_id,
            "path": self.path,
            "sha256": self.sha256,
            "bytes": self.size,
            "root": self.root,
            "timestamp": self.timestamp,
            "anchor_sequence": self.anchor_sequence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexEntry":
        return cls(
            checkpoint_id=data["checkpoint_id"],
            path=data["path"],
            sha256=data["sha256"],
            size=data.get("bytes", data.get("size", 0)),
            root=data["root"],
            timestamp=data["timestamp"],
            anchor_sequence=data.get("anchor_sequence"),
        )


@dataclass
class StoreIndex:
    """Index over every record in a store directory, ordered by id."""
    format_version: str = STORE_FORMAT_VERSION
    schema_version: str = SCHEMA_VERSION
    entries: list[IndexEntry] = field(default_factory=list)
    created_at: str | None = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc).isoformat()

    @property
    def next_id(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        # None values are dropped by the canonical serializer
        return {
            "format_version": self.format_version,
            "schema_version": self.schema_version,
            "created_at": self.created_at,
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreIndex":
        return cls(
            format_version=data.get("format_version", STORE_FORMAT_VERSION),
            schema_version=data.get("schema_version", SCHEMA_VERSION),
            entries=[IndexEntry.from_dict(e) for e in data.get("entries", [])],
            created_at=data.get("created_at"),
        )


def _atomic_write(path: Path, data: bytes) -> None:
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_bytes(data)
    os.replace(tmp, path)


def write_record(directory: Path, record: CheckpointRecord) -> IndexEntry:
    """
    Write one record file. Existing files are never overwritten.

    Raises:
        CheckpointStoreException: If the record has no id or its file exists
    """
    if record.checkpoint_id is None:
        raise CheckpointStoreException("Cannot write a record without a checkpoint_id")

    filename = record_filename(record.checkpoint_id)
    path = directory / filename
    if path.exists():
        raise CheckpointStoreException(
            f"Record file already exists: {filename}",
            details={"checkpoint_id": record.checkpoint_id},
        )

    data = dump_record(record)
    _atomic_write(path, data)
    return make_index_entry(record, data)


def make_index_entry(record: CheckpointRecord, data: bytes) -> IndexEntry:
    """Index row for a record whose file holds `data`."""
    return IndexEntry(
        checkpoint_id=record.checkpoint_id,
        path=record_filename(record.checkpoint_id),
        sha256=compute_sha256(data),
        size=len(data),
        root=record.root,
        timestamp=format_datetime_canonical(record.timestamp),
        anchor_sequence=record.anchor.sequence if record.anchor else None,
    )


def set_aside(directory: Path, filename: str) -> Path:
    """
    Rename an unindexed record file out of the way.

    The file is kept as `<name>.orphan-<sha256 prefix>` so nothing is lost.
    """
    path = directory / filename
    target = path.with_name(f"{filename}.orphan-{compute_sha256(path.read_bytes())[:12]}")
    os.replace(path, target)
    return target


def read_record(directory: Path, entry: IndexEntry, *, verify_hash: bool = True) -> CheckpointRecord:
    """
    Load one record file listed in the index.

    Raises:
        CheckpointStoreException: File missing or unparseable
        CheckpointHashMismatchError: File bytes differ from the index hash
    """
    path = directory / entry.path
    try:
        data = path.read_bytes()
    except OSError as e:
        raise CheckpointStoreException(
            f"Cannot read record file {entry.path}: {e}",
            details={"checkpoint_id": entry.checkpoint_id},
        ) from e

    if verify_hash:
        actual = compute_sha256(data)
        if actual != entry.sha256:
            raise CheckpointHashMismatchError(entry.path, entry.sha256, actual)

    try:
        return CheckpointRecord.model_validate(json.loads(data.decode("utf-8")))
    except (ValueError, ValidationError) as e:
        raise CheckpointStoreException(
            f"Invalid record file {entry.path}: {e}",
            details={"checkpoint_id": entry.checkpoint_id},
        ) from e


def load_index(directory: Path) -> StoreIndex:
    """Load the index, or an empty one if the directory has none yet."""
    path = directory / INDEX_FILE
    if not path.exists():
        return StoreIndex()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CheckpointStoreException(f"Cannot read store index: {e}") from e
    return StoreIndex.from_dict(data)


def save_index(directory: Path, index: StoreIndex) -> None:
    _atomic_write(directory / INDEX_FILE, dumps_canonical(index.to_dict()).encode("utf-8"))


__all__ = [
    "INDEX_FILE",
    "RECORD_FILE_TEMPLATE",
    "CheckpointHashMismatchError",
    "IndexEntry",
    "StoreIndex",
    "compute_sha256",
    "dump_record",
    "load_index",
    "make_index_entry",
    "read_record",
    "record_filename",
    "save_index",
    "set_aside",
    "write_record",
]
