"""
Module 05 - Anchoring
File: memory.py

Purpose: In-process authoritative store.

Reference implementation used for dry runs, tests and local demos. It
verifies proofs with exactly the same rule as the local verifier.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from core.anchor.base import AuthoritativeStore
from core.crypto.hashing import HashFunction, from_hex, keccak256, to_hex
from core.merkle.merkle_tree import verify_merkle_proof
from core.schemas.checkpoint import AnchoredCheckpoint, AnchorReference
from core.schemas.errors import AnchorNotFoundException


logger = logging.getLogger(__name__)


class InMemoryAuthoritativeStore(AuthoritativeStore):
    """
    Authoritative store held in a list.

    Entries are never modified after submission. A repeated submission of
    an identical (root, metadata) pair returns the original reference.
    """

    def __init__(
        self,
        *,
        agent_id: str = "default",
        network: str = "memory",
        hash_fn: HashFunction = keccak256,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.agent_id = agent_id
        self.network = network
        self.hash_fn = hash_fn
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._entries: list[AnchoredCheckpoint] = []
        self._references: dict[tuple[str, str], AnchorReference] = {}

    def submit(self, root: bytes, metadata: str) -> AnchorReference:
        key = (to_hex(root), metadata)
        existing = self._references.get(key)
        if existing is not None:
            logger.info("Root %s already anchored at sequence %d", key[0][:18], existing.sequence)
            return existing

        sequence = len(self._entries)
        now = self._clock()
        self._entries.append(AnchoredCheckpoint(
            sequence=sequence,
            root=key[0],
            metadata=metadata,
            timestamp=now,
            block_number=sequence,
        ))
        reference = AnchorReference(
            sequence=sequence,
            block_number=sequence,
            network=self.network,
            registry=f"memory://{self.agent_id}",
            anchored_at=now,
        )
        self._references[key] = reference
        logger.info("Anchored root %s at sequence %d", key[0][:18], sequence)
        return reference

    def get(self, sequence: int) -> AnchoredCheckpoint:
        if sequence < 0 or sequence >= len(self._entries):
            raise AnchorNotFoundException(sequence)
        return self._entries[sequence]

    def verify_proof(self, sequence: int, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        entry = self.get(sequence)
        return verify_merkle_proof(leaf, siblings, from_hex(entry.root), self.hash_fn)

    def count(self) -> int:
        return len(self._entries)


__all__ = ["InMemoryAuthoritativeStore"]
