"""
Common test fixtures shared by all modules.

Provides factory functions for the core memory anchor structures:
- LeafContent lists and CheckpointRecords
- On-disk workspaces for FileLeafSource
- An authoritative store that fails a set number of times

These are the foundational building blocks used by higher-level tests.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from core.anchor.base import AuthoritativeStore
from core.anchor.memory import InMemoryAuthoritativeStore
from core.checkpoint.builder import build_checkpoint_from_contents
from core.checkpoint.sources import LeafContent
from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, LeafHasher
from core.schemas.checkpoint import AnchorReference, CheckpointRecord
from core.schemas.errors import StoreUnavailableException


FIXED_NOW = datetime(2026, 2, 3, 10, 15, 0, tzinfo=timezone.utc)

DEFAULT_CONTENTS: dict[str, bytes] = {
    "MEMORY.md": b"# Memory\n\nLong-term notes.\n",
    "GOALS.md": b"# Goals\n\n- ship the registry\n",
    "memory/2026-02-03.md": b"Decided to pivot to on-chain anchoring.\n",
}


def toy_hash(data: bytes) -> bytes:
    """
    One-byte additive hash for hand-checkable trees.

    Sorted pairing does not matter to an additive hash, which makes the
    expected layers easy to work out on paper.
    """
    return bytes([sum(data) % 256])


# =============================================================================
# Checkpoint Factories
# =============================================================================

def make_leaf_contents(
    items: Optional[dict[str, bytes]] = None,
    observed_at: Optional[datetime] = None,
) -> list[LeafContent]:
    """Create LeafContent items in dict order."""
    items = DEFAULT_CONTENTS if items is None else items
    return [
        LeafContent(path=path, data=data, observed_at=observed_at)
        for path, data in items.items()
    ]


def make_record(
    items: Optional[dict[str, bytes]] = None,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
    now: datetime = FIXED_NOW,
    anchor_sequence: Optional[int] = None,
    checkpoint_id: Optional[int] = None,
) -> CheckpointRecord:
    """
    Build a CheckpointRecord from in-memory contents.

    Args:
        items: path -> bytes (defaults to DEFAULT_CONTENTS)
        algorithm: Hash algorithm name
        now: Checkpoint timestamp
        anchor_sequence: If set, attach an AnchorReference with this sequence
        checkpoint_id: If set, assign this local id
    """
    record = build_checkpoint_from_contents(
        make_leaf_contents(items),
        hasher=LeafHasher(algorithm),
        now=now,
    )
    if anchor_sequence is not None:
        record = record.with_anchor(AnchorReference(
            sequence=anchor_sequence,
            block_number=anchor_sequence,
            network="memory",
            registry="memory://test",
            anchored_at=now,
        ))
    if checkpoint_id is not None:
        record = record.with_checkpoint_id(checkpoint_id)
    return record


def make_workspace(
    root: Path,
    files: Optional[dict[str, bytes]] = None,
) -> Path:
    """
    Write files under `root` and return it.

    Relative paths may include directories (e.g. "memory/2026-02-03.md").
    """
    files = DEFAULT_CONTENTS if files is None else files
    root.mkdir(parents=True, exist_ok=True)
    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


# =============================================================================
# Authoritative Store Doubles
# =============================================================================

class FlakyStore(AuthoritativeStore):
    """
    Raises StoreUnavailableException for the first `failures` submissions,
    then delegates to an in-memory store.
    """

    network = "memory"

    def __init__(self, failures: int, inner: Optional[InMemoryAuthoritativeStore] = None) -> None:
        self.failures = failures
        self.inner = inner or InMemoryAuthoritativeStore()
        self.submissions: list[tuple[bytes, str]] = []

    def submit(self, root: bytes, metadata: str) -> AnchorReference:
        self.submissions.append((root, metadata))
        if len(self.submissions) <= self.failures:
            raise StoreUnavailableException(f"down (attempt {len(self.submissions)})")
        return self.inner.submit(root, metadata)

    def get(self, sequence: int):
        return self.inner.get(sequence)

    def verify_proof(self, sequence: int, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        return self.inner.verify_proof(sequence, leaf, siblings)

    def count(self) -> int:
        return self.inner.count()
