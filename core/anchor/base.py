"""
Module 05 - Anchoring
File: base.py

Purpose: Interface of the authoritative store.

The authoritative store is the external, append-only registry that holds
published roots. Stored roots are immutable once written and are
addressed by a per-agent sequence number. It can also replay the
inclusion check itself, which lets a third party confirm a proof without
trusting the local verifier.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from core.schemas.checkpoint import AnchoredCheckpoint, AnchorReference


class AuthoritativeStore(ABC):
    """Append-only registry of published roots."""

    #: Label recorded on anchor references (e.g. "testnet", "memory")
    network: str = ""

    @abstractmethod
    def submit(self, root: bytes, metadata: str) -> AnchorReference:
        """
        Publish a root.

        Submitting a (root, metadata) pair that was already accepted
        returns the existing reference instead of creating a new entry.

        Raises:
            StoreUnavailableException: Store unreachable (retryable)
            StoreRejectedException: Store refused the submission
        """

    @abstractmethod
    def get(self, sequence: int) -> AnchoredCheckpoint:
        """
        Fetch a published root by sequence.

        Raises:
            AnchorNotFoundException: Unknown sequence
            StoreUnavailableException: Store unreachable
        """

    @abstractmethod
    def verify_proof(self, sequence: int, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        """
        Replay an inclusion check against the root stored at `sequence`.

        Returns False for a proof that does not recompute the stored root.

        Raises:
            AnchorNotFoundException: Unknown sequence
            StoreUnavailableException: Store unreachable
        """

    @abstractmethod
    def count(self) -> int:
        """Number of published roots."""


__all__ = ["AuthoritativeStore"]
