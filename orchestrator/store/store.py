"""
Module 06 - Checkpoint Store
File: store.py

Purpose: Append-only local store of CheckpointRecords.

Records are keyed by a local checkpoint id assigned on append (0, 1, 2,
...). The root is a secondary lookup that can match several records, and
the external sequence reference is a third lookup once a record has been
anchored. Indexed records are never rewritten or deleted. A record file
that never made it into the index (the index write failed) is picked up
by the next append.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional

from core.schemas.checkpoint import CheckpointRecord
from core.schemas.errors import CheckpointNotFoundException, CheckpointStoreException
from core.schemas.versioning import is_compatible_store_format

from orchestrator.store.io import (
    IndexEntry,
    StoreIndex,
    dump_record,
    load_index,
    make_index_entry,
    read_record,
    record_filename,
    save_index,
    set_aside,
    write_record,
)


logger = logging.getLogger(__name__)


class LocalCheckpointStore:
    """
    Directory-backed checkpoint store.

    Usage:
        store = LocalCheckpointStore("checkpoints")
        stored = store.append(record)
        same = store.get(stored.checkpoint_id)
    """

    def __init__(self, directory: str | Path, *, verify_hashes: bool = True) -> None:
        self.directory = Path(directory)
        self.verify_hashes = verify_hashes
        self._index: Optional[StoreIndex] = None

    @property
    def index(self) -> StoreIndex:
        if self._index is None:
            index = load_index(self.directory)
            if not is_compatible_store_format(index.format_version):
                raise CheckpointStoreException(
                    f"Incompatible store format: {index.format_version}",
                    details={"directory": str(self.directory)},
                )
            self._index = index
        return self._index

    def __len__(self) -> int:
        return len(self.index.entries)

    def __iter__(self) -> Iterator[CheckpointRecord]:
        for entry in self.index.entries:
            yield self._read(entry)

    def _read(self, entry: IndexEntry) -> CheckpointRecord:
        return read_record(self.directory, entry, verify_hash=self.verify_hashes)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(self, record: CheckpointRecord) -> CheckpointRecord:
        """
        Append a record and return it with its assigned checkpoint id.

        A record that already carries an id must carry the next free id;
        anything else would overwrite or skip an entry.

        Raises:
            CheckpointStoreException: Duplicate or out-of-order id, or the index
                could not be written
        """
        index = self.index
        next_id = index.next_id

        if record.checkpoint_id is not None and record.checkpoint_id != next_id:
            if record.checkpoint_id < next_id:
                message = f"Checkpoint {record.checkpoint_id} already exists"
            else:
                message = f"Checkpoint id {record.checkpoint_id} skips ahead of {next_id}"
            raise CheckpointStoreException(
                message,
                details={"checkpoint_id": record.checkpoint_id, "next_id": next_id},
            )

        stored = record.with_checkpoint_id(next_id)
        self.directory.mkdir(parents=True, exist_ok=True)
        entry = self._recover_unindexed(stored) or write_record(self.directory, stored)

        # Swap the in-memory index only once the new one is on disk
        updated = replace(index, entries=[*index.entries, entry])
        try:
            save_index(self.directory, updated)
        except OSError as e:
            raise CheckpointStoreException(
                f"Cannot write store index: {e}",
                details={"checkpoint_id": next_id},
            ) from e
        self._index = updated

        logger.info(
            "Stored checkpoint %d (root=%s, %d leaves)",
            next_id, stored.root[:18], stored.metadata.leaf_count,
        )
        return stored

    def _recover_unindexed(self, stored: CheckpointRecord) -> Optional[IndexEntry]:
        """
        Handle a record file left behind by an append whose index write failed.

        A file holding exactly this record is indexed as is. Any other file
        under the same name is set aside so the id can be reused.
        """
        filename = record_filename(stored.checkpoint_id)
        path = self.directory / filename
        if not path.exists():
            return None

        data = dump_record(stored)
        if path.read_bytes() == data:
            logger.warning("Indexing record file %s left by an interrupted append", filename)
            return make_index_entry(stored, data)

        target = set_aside(self.directory, filename)
        logger.warning("Unindexed record file %s moved to %s", filename, target.name)
        return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, checkpoint_id: int) -> CheckpointRecord:
        """
        Raises:
            CheckpointNotFoundException: Unknown id
        """
        entries = self.index.entries
        if checkpoint_id < 0 or checkpoint_id >= len(entries):
            raise CheckpointNotFoundException(
                f"Checkpoint {checkpoint_id} not found",
                details={"checkpoint_id": checkpoint_id},
            )
        return self._read(entries[checkpoint_id])

    def find_by_root(self, root: str) -> list[CheckpointRecord]:
        """Every record with this root, oldest first."""
        target = root.lower()
        return [self._read(e) for e in self.index.entries if e.root == target]

    def get_by_sequence(self, sequence: int) -> Optional[CheckpointRecord]:
        """The record anchored at this external sequence, if any."""
        for entry in self.index.entries:
            if entry.anchor_sequence == sequence:
                return self._read(entry)
        return None

    def latest(self) -> Optional[CheckpointRecord]:
        entries = self.index.entries
        return self._read(entries[-1]) if entries else None

    def list_entries(self) -> list[IndexEntry]:
        """Index rows without loading record files."""
        return list(self.index.entries)

    def list(self) -> list[CheckpointRecord]:
        return list(self)


__all__ = ["LocalCheckpointStore"]
