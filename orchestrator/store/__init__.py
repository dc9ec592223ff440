"""
Module 06 - Checkpoint Store

Append-only local persistence of checkpoint records.
"""

from .io import (
    INDEX_FILE,
    CheckpointHashMismatchError,
    IndexEntry,
    StoreIndex,
    compute_sha256,
    dump_record,
    load_index,
    make_index_entry,
    read_record,
    record_filename,
    save_index,
    set_aside,
    write_record,
)
from .store import LocalCheckpointStore

__all__ = [
    "INDEX_FILE",
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
    "LocalCheckpointStore",
]
